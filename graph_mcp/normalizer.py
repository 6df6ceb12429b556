"""
Response Normalizer

Maps the transport's response into the ToolResult envelope. Payload
inspection here only feeds the logs; content is passed through verbatim.
"""

import json
import logging
from typing import Any, Dict

from .base import ToolResult, text_content

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500
EMPTY_SUCCESS_TEXT = json.dumps({"message": "OK!"})
EMPTY_ERROR_TEXT = json.dumps({"error": "Transport reported an error without details"})


def _preview(text: str) -> str:
    suffix = "..." if len(text) > PREVIEW_LENGTH else ""
    return f"{text[:PREVIEW_LENGTH]}{suffix}"


def log_payload_shape(text: str) -> None:
    """Emit diagnostics about a response body: size, item count, paging."""
    logger.info(f"Response size: {len(text)} characters")

    try:
        payload = json.loads(text)
    except ValueError:
        logger.info(f"Response preview (non-JSON): {_preview(text)}")
        return

    if isinstance(payload, dict):
        items = payload.get("value")
        if isinstance(items, list):
            logger.info(f"Response contains {len(items)} items")
            if items and isinstance(items[0], dict) and items[0].get("body"):
                body_size = len(json.dumps(items[0]["body"]))
                logger.info(f"First item has body field with size: {body_size} characters")
        next_link = payload.get("@odata.nextLink")
        if next_link:
            logger.info(f"Response has pagination nextLink: {next_link}")

    logger.info(f"Response preview: {_preview(text)}")


def _normalize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    if item.get("type", "text") == "text":
        return text_content(item.get("text", ""))
    return item


def normalize_response(response: ToolResult) -> ToolResult:
    """Re-wrap the transport's content items into the tool envelope."""
    content = list(response.get("content") or [])

    if content and isinstance(content[0].get("text"), str):
        log_payload_shape(content[0]["text"])

    items = [_normalize_item(item) for item in content]
    is_error = bool(response.get("isError", False))
    if not items:
        items = [text_content(EMPTY_ERROR_TEXT if is_error else EMPTY_SUCCESS_TEXT)]

    result: ToolResult = {"content": items, "isError": is_error}
    if response.get("_meta") is not None:
        result["_meta"] = response["_meta"]
    return result
