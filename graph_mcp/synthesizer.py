"""
Request Synthesizer

Turns bound arguments into a concrete request and layers the Graph-specific
fixups (Excel workbook sessions, media downloads) on top of the generic path.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .binder import BoundArguments, RawBody, encode_component
from .catalog import EndpointDescriptor

logger = logging.getLogger(__name__)

EXCEL_MARKER = "excel"
WORKBOOK_MARKER = "workbook"
DRIVE_ROOT_FILE = re.compile(r"/me/drive/root:([^:]+):")

MEDIA_CONTENT_HINT = "Retrieved media content"
CONTENT_SUFFIX = "/content"


@dataclass
class SynthesizedRequest:
    method: str
    path: str
    query_string: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None
    excel_file: Optional[str] = None
    raw_response: bool = False

    @property
    def url(self) -> str:
        """Resolved path with the query string appended."""
        if not self.query_string:
            return self.path
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{self.query_string}"

    def to_options(self) -> Dict[str, Any]:
        """Request options in the shape the transport adapter expects."""
        options: Dict[str, Any] = {"method": self.method, "headers": dict(self.headers)}
        if self.body is not None:
            options["body"] = self.body
        if self.excel_file:
            options["excel_file"] = self.excel_file
        if self.raw_response:
            options["raw_response"] = True
        return options


def build_query_string(query: Dict[str, str]) -> str:
    return "&".join(
        f"{encode_component(key, safe='$')}={encode_component(value)}"
        for key, value in query.items()
    )


def serialize_body(bound: BoundArguments) -> Optional[str]:
    if bound.body is None:
        return None
    if isinstance(bound.body, RawBody):
        return bound.body.text
    if bound.body.value is None:
        return None
    if isinstance(bound.body.value, str):
        return bound.body.value
    return json.dumps(bound.body.value)


# ============== Fixups ==============

def is_excel_workbook_request(descriptor: EndpointDescriptor, request: SynthesizedRequest) -> bool:
    return EXCEL_MARKER in descriptor.name and WORKBOOK_MARKER in request.path


def attach_excel_file(descriptor: EndpointDescriptor, request: SynthesizedRequest) -> None:
    logger.info(f"Excel operation detected: {descriptor.name}")
    match = DRIVE_ROOT_FILE.search(request.path)
    if match:
        request.excel_file = match.group(1)
        logger.info(f"Extracted Excel file path: {request.excel_file}")


def is_media_content_request(descriptor: EndpointDescriptor, request: SynthesizedRequest) -> bool:
    return MEDIA_CONTENT_HINT in descriptor.error_hints or request.path.endswith(CONTENT_SUFFIX)


def request_raw_response(descriptor: EndpointDescriptor, request: SynthesizedRequest) -> None:
    request.raw_response = True


Fixup = Tuple[
    Callable[[EndpointDescriptor, SynthesizedRequest], bool],
    Callable[[EndpointDescriptor, SynthesizedRequest], None],
]

FIXUPS: List[Fixup] = [
    (is_excel_workbook_request, attach_excel_file),
    (is_media_content_request, request_raw_response),
]


def synthesize_request(
    descriptor: EndpointDescriptor,
    bound: BoundArguments,
    fixups: List[Fixup] = FIXUPS,
) -> SynthesizedRequest:
    """Assemble the request for one invocation and apply the fixups."""
    method = descriptor.method.upper()

    request = SynthesizedRequest(
        method=method,
        path=bound.path,
        query_string=build_query_string(bound.query),
        headers=dict(bound.headers),
    )

    if method != "GET":
        request.body = serialize_body(bound)

    for applies, transform in fixups:
        if applies(descriptor, request):
            transform(descriptor, request)

    return request
