"""
MCP Server Entrypoint

HTTP API server that exposes every registered Graph tool.
Tools come from the registry built at startup (see cli.py).
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from . import __version__
from .base import ToolDefinition
from .graph_client import GraphClient
from .registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVICE_NAME = "Microsoft 365 MCP Server"
SERVICE_VERSION = __version__


class ToolRequest(BaseModel):
    """Request body for tool execution."""

    arguments: Dict[str, Any] = {}


class ToolResponse(BaseModel):
    """ToolResult envelope returned from tool execution."""

    content: List[Dict[str, Any]]
    meta: Optional[Dict[str, Any]] = Field(default=None, alias="_meta")
    isError: bool = False


def _describe(tool: ToolDefinition) -> Dict[str, Any]:
    return {
        "name": tool.name,
        "title": tool.title,
        "description": tool.description,
        "category": tool.category,
        "readOnlyHint": tool.read_only,
        "inputSchema": tool.input_schema(),
    }


def create_app(registry: ToolRegistry, graph_client: Optional[GraphClient] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        names = registry.list_tool_names()
        mode = "read-only" if registry.read_only else "read-write"
        logger.info(f"MCP Server starting with {len(names)} tools ({mode})")
        for name in names:
            logger.info(f"  - {name}")

        yield

        if graph_client is not None:
            await graph_client.aclose()
        logger.info("MCP Server shutting down")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Microsoft Graph endpoints exposed as MCP tools",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    @app.get("/")
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "read_only": registry.read_only,
            "tools_count": len(registry.list_tool_names()),
            "endpoints": {
                "list_tools": "/tools",
                "tool_schema": "/tools/schema",
                "execute": "/tools/{tool_name}/execute",
                "health": "/health",
            },
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy", "tools_loaded": len(registry.list_tool_names())}

    @app.get("/tools")
    async def list_tools():
        tools = registry.get_all_tools()
        return {
            "total": len(tools),
            "tools": [_describe(tool) for tool in tools.values()],
        }

    @app.get("/tools/schema")
    async def get_tools_schema():
        return {"tools": registry.get_openai_tools_schema()}

    @app.get("/tools/{tool_name}")
    async def get_tool_info(tool_name: str):
        tool = registry.get_tool(tool_name)
        if tool is None:
            raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")
        return _describe(tool)

    @app.post(
        "/tools/{tool_name}/execute",
        response_model=ToolResponse,
        response_model_by_alias=True,
        response_model_exclude_none=True,
    )
    async def execute_tool_endpoint(tool_name: str, request: ToolRequest):
        if registry.get_tool(tool_name) is None:
            raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")
        result = await registry.execute_tool(tool_name, **request.arguments)
        return ToolResponse(**result)

    return app
