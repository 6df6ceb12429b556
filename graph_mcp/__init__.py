"""
Microsoft Graph MCP Layer

Exposes Graph REST endpoints as MCP tools generated from a static catalog.
"""

__version__ = "0.1.0"

from .base import MCPTool, ToolDefinition, tool_boundary
from .catalog import EndpointDescriptor, ParameterLocation, ParameterSpec, load_catalog
from .registry import ToolRegistry, build_registry

__all__ = [
    "EndpointDescriptor",
    "MCPTool",
    "ParameterLocation",
    "ParameterSpec",
    "ToolDefinition",
    "ToolRegistry",
    "build_registry",
    "load_catalog",
    "tool_boundary",
]
