"""
Parameter Binder

Routes caller-supplied arguments to their transport location (path segment,
query string, header or body) using the descriptor's parameter metadata.
Binding never fails: unknown arguments are dropped and unparsable bodies
degrade to raw strings.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from .catalog import EndpointDescriptor, ParameterLocation, ParameterSpec

logger = logging.getLogger(__name__)

# Reserved OData system query options. Hosts cannot pass "$" in argument
# names, so the sigil is restored here.
ODATA_PARAMS = frozenset([
    "filter",
    "select",
    "expand",
    "orderby",
    "skip",
    "top",
    "count",
    "search",
    "format",
])

LEGACY_BODY_NAME = "body"

# encodeURIComponent leaves these literal besides the unreserved set.
_URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class RawBody:
    text: str


@dataclass(frozen=True)
class StructuredBody:
    value: Any


BodyArgument = Union[RawBody, StructuredBody]


@dataclass
class BoundArguments:
    """Per-call output of the binder, consumed by the synthesizer."""
    path: str
    query: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[BodyArgument] = None


def encode_component(value: str, safe: str = "") -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE + safe)


def fix_param_name(name: str) -> str:
    """Map an argument name to its protocol-reserved form, if it has one."""
    lowered = name.lower()
    if lowered in ODATA_PARAMS:
        return f"${lowered}"
    return name


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def parse_body(value: Any) -> BodyArgument:
    """Best-effort parse of a body argument; strings that are not JSON stay raw."""
    if isinstance(value, str):
        try:
            return StructuredBody(json.loads(value))
        except ValueError:
            return RawBody(value)
    return StructuredBody(value)


def _bind_path(bound: BoundArguments, spec: ParameterSpec, value: Any) -> None:
    encoded = encode_component(stringify(value))
    bound.path = (
        bound.path
        .replace(f"{{{spec.name}}}", encoded, 1)
        .replace(f":{spec.name}", encoded, 1)
    )


def _bind_query(bound: BoundArguments, spec: ParameterSpec, value: Any) -> None:
    bound.query[fix_param_name(spec.name)] = stringify(value)


def _bind_header(bound: BoundArguments, spec: ParameterSpec, value: Any) -> None:
    bound.headers[fix_param_name(spec.name)] = stringify(value)


def _bind_body(bound: BoundArguments, spec: Optional[ParameterSpec], value: Any) -> None:
    bound.body = parse_body(value)


_ROUTES = {
    ParameterLocation.PATH: _bind_path,
    ParameterLocation.QUERY: _bind_query,
    ParameterLocation.HEADER: _bind_header,
    ParameterLocation.BODY: _bind_body,
}


def bind_arguments(
    descriptor: EndpointDescriptor, arguments: Mapping[str, Any]
) -> BoundArguments:
    """Route every argument of one invocation to its transport location."""
    bound = BoundArguments(path=descriptor.path)

    for name, value in arguments.items():
        spec = descriptor.find_parameter(name)
        if spec is not None:
            _ROUTES[spec.location](bound, spec, value)
        elif name == LEGACY_BODY_NAME:
            _bind_body(bound, None, value)
            logger.info(f"Set legacy body param for {descriptor.name}")
        else:
            logger.debug(f"Dropping unknown argument {name!r} for {descriptor.name}")

    return bound
