"""
MCP Tool Registry

Single Source of Truth (SSOT) for the tools exposed to the host.
Built once at startup from the endpoint catalog plus the hand-authored
auxiliary tools; read-only afterwards.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .base import (
    MCPTool,
    MCPToolError,
    ToolDefinition,
    ToolResult,
    TransportAdapter,
    error_result,
)
from .catalog import EndpointDescriptor
from .tools import AUXILIARY_TOOLS, GraphEndpointTool

logger = logging.getLogger(__name__)


class DuplicateToolError(MCPToolError):
    """Raised when two tools would be registered under the same name."""
    pass


class ToolRegistry:
    """Registry of tool definitions keyed by name."""

    def __init__(self, read_only: bool = False):
        self.read_only = read_only
        self._tools: Dict[str, ToolDefinition] = {}

    def register(self, definition: ToolDefinition) -> None:
        if definition.name in self._tools:
            raise DuplicateToolError(
                f"Tool already registered: {definition.name}",
                tool_name=definition.name
            )
        self._tools[definition.name] = definition

    def register_tool(self, tool: MCPTool) -> None:
        self.register(tool.to_definition())

    def get_all_tools(self) -> Dict[str, ToolDefinition]:
        return self._tools.copy()

    def get_tool(self, name: str) -> Optional[ToolDefinition]:
        """
        Get a specific tool by name.
        Returns None if tool not found.
        """
        return self._tools.get(name)

    def list_tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def get_openai_tools_schema(self) -> List[Dict]:
        """
        Get all tools in OpenAI function calling format.
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": name,
                    "description": definition.description,
                    "parameters": definition.input_schema(),
                },
            }
            for name, definition in self._tools.items()
        ]

    async def execute_tool(self, name: str, /, **kwargs) -> ToolResult:
        """
        Execute a tool by name with given arguments.
        Always returns a ToolResult envelope.
        """
        tool = self.get_tool(name)

        if tool is None or tool.handler is None:
            return error_result(name, MCPToolError(f"Tool not found: {name}", tool_name=name))

        return await tool.handler(**kwargs)


def register_graph_tools(
    registry: ToolRegistry,
    endpoints: Iterable[EndpointDescriptor],
    graph_client: TransportAdapter,
) -> None:
    """Register one tool per catalog endpoint plus the auxiliary tools.

    In read-only mode every non-GET endpoint and every auxiliary tool that
    does not declare itself read-only is left out entirely.
    """
    for descriptor in endpoints:
        if registry.read_only and not descriptor.is_read:
            logger.info(f"Skipping write operation {descriptor.name} in read-only mode")
            continue
        registry.register_tool(GraphEndpointTool(descriptor, graph_client))

    for tool_class in AUXILIARY_TOOLS:
        tool = tool_class(graph_client)
        if registry.read_only and not tool.read_only:
            logger.info(f"Skipping write operation {tool.name} in read-only mode")
            continue
        registry.register_tool(tool)

    logger.info(f"Tool registration complete. Total tools: {len(registry.list_tool_names())}")


def build_registry(
    endpoints: Iterable[EndpointDescriptor],
    graph_client: TransportAdapter,
    read_only: bool = False,
) -> ToolRegistry:
    registry = ToolRegistry(read_only=read_only)
    register_graph_tools(registry, endpoints, graph_client)
    return registry
