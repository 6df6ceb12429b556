"""
MCP Tool Base Classes and Decorators

Provides the common wrapper, validation, result envelope and error handling
for every Graph tool, catalog-derived or hand-authored.
"""

import functools
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)

ToolResult = Dict[str, Any]
ToolHandler = Callable[..., Awaitable[ToolResult]]


@dataclass
class ToolParameter:
    """Definition of a tool parameter as presented to callers."""
    name: str
    schema: Dict[str, Any] = field(default_factory=dict)
    description: str = ""
    required: bool = False
    default: Any = None

    def to_json_schema(self) -> Dict[str, Any]:
        prop = dict(self.schema)
        if self.description and "description" not in prop:
            prop["description"] = self.description
        if self.default is not None and "default" not in prop:
            prop["default"] = self.default
        return prop


@dataclass
class ToolDefinition:
    """Complete definition of a registered MCP tool."""
    name: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)
    handler: Optional[ToolHandler] = None
    read_only: bool = False
    category: str = "graph"

    @property
    def title(self) -> str:
        return self.name

    def input_schema(self) -> Dict[str, Any]:
        """JSON Schema object describing the accepted arguments."""
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""
    def __init__(self, message: str, tool_name: str = None, details: Dict = None):
        self.message = message
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(MCPToolError):
    """Raised when tool input validation fails."""
    pass


class ExecutionError(MCPToolError):
    """Raised when tool execution fails."""
    pass


class TransportAdapter(Protocol):
    """The HTTP collaborator every tool dispatches through."""

    async def graph_request(
        self, path: str, options: Optional[Dict[str, Any]] = None
    ) -> ToolResult:
        ...


def text_content(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def error_message(exc: BaseException) -> str:
    """Extract the human-readable message from any raised value."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__


def error_result(tool_name: str, exc: BaseException) -> ToolResult:
    """Build the single-item error envelope for a failed invocation."""
    payload = {"error": f"Error in tool {tool_name}: {error_message(exc)}"}
    return {
        "content": [text_content(json.dumps(payload))],
        "isError": True,
    }


def tool_boundary(name: str) -> Callable[[ToolHandler], ToolHandler]:
    """
    Wrap an async tool handler so that nothing raised inside it crosses
    the tool boundary; failures come back as an error envelope.

    Usage:
        @tool_boundary("list-mail-messages")
        async def handler(**kwargs):
            ...
    """
    def decorator(func: ToolHandler) -> ToolHandler:
        @functools.wraps(func)
        async def wrapper(**kwargs) -> ToolResult:
            try:
                return await func(**kwargs)
            except Exception as e:
                logger.error(f"Error in tool {name}: {error_message(e)}")
                return error_result(name, e)

        return wrapper

    return decorator


class MCPTool(ABC):
    """
    Abstract base class for MCP tools.

    All tools must inherit from this class and implement:
    - name: Tool identifier
    - description: What the tool does
    - parameters: List of ToolParameter definitions
    - execute(): The actual tool logic, returning a ToolResult envelope
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for the tool."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        pass

    @property
    def parameters(self) -> List[ToolParameter]:
        """List of parameters the tool accepts."""
        return []

    @property
    def read_only(self) -> bool:
        """Whether the tool leaves remote state untouched."""
        return False

    @property
    def category(self) -> str:
        """Category for grouping tools."""
        return "graph"

    def validate(self, /, **kwargs) -> Dict[str, Any]:
        """
        Validate input parameters.
        Returns validated/normalized parameters.
        Raises ValidationError if validation fails.
        """
        validated = {}

        for param in self.parameters:
            value = kwargs.get(param.name)

            if value is None:
                if param.required:
                    raise ValidationError(
                        f"Missing required parameter: {param.name}",
                        tool_name=self.name
                    )
                value = param.default

            validated[param.name] = value

        return validated

    @abstractmethod
    async def execute(self, /, **kwargs) -> ToolResult:
        """
        Execute the tool with given parameters.
        This method should contain the actual tool logic.
        """
        pass

    async def run(self, /, **kwargs) -> ToolResult:
        """Public entry point: validate and execute."""
        logger.info(f"Tool {self.name} called with params: {json.dumps(kwargs, default=str)}")
        validated = self.validate(**kwargs)
        return await self.execute(**validated)

    def to_definition(self) -> ToolDefinition:
        """Convert tool to ToolDefinition for the registry."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            handler=tool_boundary(self.name)(self.run),
            read_only=self.read_only,
            category=self.category,
        )
