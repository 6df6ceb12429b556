"""
Microsoft Graph Client

httpx-based transport the tools dispatch through. Authentication is not
performed here: a ready-made bearer token is read from the constructor or
MS365_MCP_ACCESS_TOKEN. No retries, no rate limiting, no response caching.
"""

import base64
import json
import logging
import os
from typing import Any, Dict, Optional

import httpx

from .base import ExecutionError, ToolResult, text_content

logger = logging.getLogger(__name__)

GRAPH_API_BASE = "https://graph.microsoft.com/v1.0"
DEFAULT_TIMEOUT = 30.0
WORKBOOK_SESSION_HEADER = "workbook-session-id"

_TEXTUAL_TYPES = ("text/", "application/json", "application/xml", "application/javascript")


class GraphError(ExecutionError):
    """Raised for failed Graph requests."""
    def __init__(self, message: str, status_code: int = None, details: Dict = None):
        self.status_code = status_code
        super().__init__(message, details=details)


def _is_textual(content_type: str) -> bool:
    return any(content_type.startswith(prefix) for prefix in _TEXTUAL_TYPES)


class GraphClient:
    """
    Executes Graph requests and returns them as ToolResult envelopes.

    Keeps one workbook session per Excel file path so that consecutive
    workbook operations on the same file share server-side state.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: str = GRAPH_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self._sessions: Dict[str, str] = {}

    def _get_token(self) -> str:
        token = self.access_token or os.environ.get("MS365_MCP_ACCESS_TOKEN", "")
        if not token:
            raise GraphError(
                "No access token available. Set MS365_MCP_ACCESS_TOKEN to a valid Graph token."
            )
        return token

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._get_token()}",
            "Content-Type": "application/json",
        }
        headers.update(extra or {})
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        headers: Dict[str, str],
        body: Optional[str] = None,
    ) -> httpx.Response:
        resp = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            content=body.encode("utf-8") if body is not None else None,
        )
        if resp.status_code >= 400:
            detail = resp.text
            try:
                detail = resp.json().get("error", {}).get("message", detail)
            except Exception:
                pass
            raise GraphError(
                f"Microsoft Graph API error ({resp.status_code}): {detail}",
                status_code=resp.status_code,
                details={"path": path},
            )
        return resp

    async def create_workbook_session(self, file_path: str) -> str:
        """Return the cached workbook session for file_path, creating it if needed."""
        session_id = self._sessions.get(file_path)
        if session_id:
            return session_id

        resp = await self._send(
            "POST",
            f"/me/drive/root:{file_path}:/workbook/createSession",
            self._headers(),
            json.dumps({"persistChanges": True}),
        )
        session_id = resp.json().get("id")
        if not session_id:
            raise GraphError(f"Workbook session for {file_path} returned no id")

        self._sessions[file_path] = session_id
        logger.info(f"Created workbook session for {file_path}")
        return session_id

    def _format_response(self, resp: httpx.Response, raw_response: bool) -> ToolResult:
        if resp.status_code == 204 or not resp.content:
            return {"content": [text_content(json.dumps({"message": "OK!"}))]}

        content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()

        if raw_response and not _is_textual(content_type):
            payload = {
                "contentType": content_type or "application/octet-stream",
                "encoding": "base64",
                "contentBytes": base64.b64encode(resp.content).decode("ascii"),
            }
            return {"content": [text_content(json.dumps(payload))]}

        if raw_response:
            return {"content": [text_content(resp.text)]}

        try:
            data = resp.json()
        except ValueError:
            logger.info(f"Non-JSON response ({content_type or 'unknown type'}), returning raw text")
            return {"content": [text_content(resp.text)]}

        return {"content": [text_content(json.dumps(data))]}

    async def graph_request(
        self, path: str, options: Optional[Dict[str, Any]] = None
    ) -> ToolResult:
        """Execute one Graph request described by path and options."""
        options = options or {}
        method = (options.get("method") or "GET").upper()
        extra_headers = dict(options.get("headers") or {})

        excel_file = options.get("excel_file")
        if excel_file:
            extra_headers[WORKBOOK_SESSION_HEADER] = await self.create_workbook_session(excel_file)

        resp = await self._send(method, path, self._headers(extra_headers), options.get("body"))
        return self._format_response(resp, bool(options.get("raw_response")))

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http_client.aclose()
