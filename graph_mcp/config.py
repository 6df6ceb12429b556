"""
Runtime configuration, read from the process environment (and .env).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .graph_client import DEFAULT_TIMEOUT, GRAPH_API_BASE

TRUTHY = ("1", "true")


def env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in TRUTHY


@dataclass
class Settings:
    read_only: bool = False
    access_token: Optional[str] = None
    graph_base_url: str = GRAPH_API_BASE
    graph_timeout: float = DEFAULT_TIMEOUT
    catalog_path: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            read_only=env_flag("READ_ONLY"),
            access_token=os.getenv("MS365_MCP_ACCESS_TOKEN") or None,
            graph_base_url=os.getenv("GRAPH_BASE_URL", GRAPH_API_BASE),
            graph_timeout=float(os.getenv("GRAPH_TIMEOUT", DEFAULT_TIMEOUT)),
            catalog_path=os.getenv("GRAPH_MCP_CATALOG") or None,
            host=os.getenv("GRAPH_MCP_HOST", "127.0.0.1"),
            port=int(os.getenv("GRAPH_MCP_PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
