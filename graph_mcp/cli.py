#!/usr/bin/env python3
"""
Command line entrypoint.

Usage:
  graph-mcp [--read-only] [--http [PORT]] [--host HOST] [--catalog PATH] [-v]
  graph-mcp --list-tools
"""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from . import __version__
from .catalog import load_catalog
from .config import Settings
from .graph_client import GraphClient
from .registry import build_registry
from .server import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graph-mcp",
        description="Microsoft 365 MCP Server",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-v", dest="verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Start server in read-only mode, disabling write operations",
    )
    parser.add_argument(
        "--http",
        nargs="?",
        type=int,
        const=3000,
        default=None,
        metavar="PORT",
        help="Port for the HTTP transport (default: 3000)",
    )
    parser.add_argument("--host", default=None, help="Interface to bind the HTTP server to")
    parser.add_argument("--catalog", default=None, help="Path to an endpoint catalog JSON file")
    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="Print the registered tool names and exit",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse flags; READ_ONLY in the environment forces read-only mode."""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    if settings.read_only:
        args.read_only = True
    args.settings = settings
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings: Settings = args.settings

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    endpoints = load_catalog(args.catalog or settings.catalog_path)
    graph_client = GraphClient(
        access_token=settings.access_token,
        base_url=settings.graph_base_url,
        timeout=settings.graph_timeout,
    )
    registry = build_registry(endpoints, graph_client, read_only=args.read_only)

    if args.list_tools:
        for name in registry.list_tool_names():
            print(name)
        return 0

    app = create_app(registry, graph_client)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.http or settings.port,
        log_level="debug" if args.verbose else settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
