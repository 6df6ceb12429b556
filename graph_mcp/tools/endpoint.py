"""
Catalog-derived Graph Tools

One GraphEndpointTool per endpoint descriptor. Its handler chains
binder -> synthesizer -> transport -> normalizer.
"""

import logging
from typing import Any, Dict, List

from ..base import MCPTool, ToolParameter, ToolResult, TransportAdapter, ValidationError
from ..binder import bind_arguments
from ..catalog import EndpointDescriptor, ParameterLocation, ParameterSpec
from ..normalizer import normalize_response
from ..synthesizer import synthesize_request

logger = logging.getLogger(__name__)


def parameter_schema(spec: ParameterSpec) -> Dict[str, Any]:
    """Caller-facing schema for one parameter.

    Body parameters with a structural schema also accept the JSON-encoded
    string form, for hosts that can only pass strings.
    """
    if spec.location is ParameterLocation.BODY and spec.schema:
        return {"anyOf": [{"type": "string"}, spec.schema]}
    return dict(spec.schema) if spec.schema else {}


class GraphEndpointTool(MCPTool):
    """A tool synthesized from one Graph endpoint descriptor."""

    def __init__(self, descriptor: EndpointDescriptor, graph_client: TransportAdapter):
        self.descriptor = descriptor
        self.graph_client = graph_client

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def description(self) -> str:
        return self.descriptor.description

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name=spec.name,
                schema=parameter_schema(spec),
                description=spec.description,
                required=spec.required,
                default=spec.default,
            )
            for spec in self.descriptor.parameters
        ]

    @property
    def read_only(self) -> bool:
        return self.descriptor.is_read

    def validate(self, /, **kwargs) -> Dict[str, Any]:
        """Check required arguments and fill defaults.

        Undeclared arguments are kept; the binder decides what to forward.
        """
        validated = {k: v for k, v in kwargs.items() if v is not None}

        for spec in self.descriptor.parameters:
            if spec.name in validated:
                continue
            if spec.default is not None:
                validated[spec.name] = spec.default
            elif spec.required:
                raise ValidationError(
                    f"Missing required parameter: {spec.name}",
                    tool_name=self.name
                )

        return validated

    async def execute(self, /, **kwargs) -> ToolResult:
        bound = bind_arguments(self.descriptor, kwargs)
        request = synthesize_request(self.descriptor, bound)

        logger.info(f"Making graph request to {request.url} with method {request.method}")
        response = await self.graph_client.graph_request(request.url, request.to_options())

        return normalize_response(response)
