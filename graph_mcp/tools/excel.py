"""
Excel Diagnostic Tool

Probes a workbook in OneDrive step by step (file, session, worksheets,
range) to tell permission problems apart from path or session problems.
"""

import json
import logging
from typing import Any, Dict, List

from ..base import ExecutionError, MCPTool, ToolParameter, ToolResult, TransportAdapter, text_content

logger = logging.getLogger(__name__)


def _first_json(tool_name: str, step: str, response: ToolResult) -> Any:
    content = response.get("content") or []
    if not content:
        raise ExecutionError(f"{step}: empty response", tool_name=tool_name)
    try:
        return json.loads(content[0].get("text", ""))
    except ValueError as e:
        raise ExecutionError(f"{step}: response is not JSON ({e})", tool_name=tool_name)


class DebugExcelAccessTool(MCPTool):
    """Debug Excel file access and permissions."""

    def __init__(self, graph_client: TransportAdapter):
        self.graph_client = graph_client

    @property
    def name(self) -> str:
        return "debug-excel-access"

    @property
    def description(self) -> str:
        return "Debug Excel file access and permissions"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="filePath",
                schema={"type": "string"},
                description="Path to Excel file (e.g., /test.xlsx)",
                required=True,
            ),
        ]

    @property
    def read_only(self) -> bool:
        # The probe session is created with persistChanges=false.
        return True

    @property
    def category(self) -> str:
        return "excel"

    async def execute(self, filePath: str) -> ToolResult:
        logger.info(f"Debugging Excel access for: {filePath}")
        root = f"/me/drive/root:{filePath}"
        results: Dict[str, Any] = {}

        file_info = await self.graph_client.graph_request(root)
        logger.info(f"File info result: {json.dumps(file_info)}")
        results["fileInfo"] = _first_json(self.name, "fileInfo", file_info)

        session = await self.graph_client.graph_request(
            f"{root}:/workbook/createSession",
            {"method": "POST", "body": json.dumps({"persistChanges": False})},
        )
        logger.info(f"Session creation result: {json.dumps(session)}")
        results["sessionResult"] = _first_json(self.name, "sessionResult", session)

        worksheets = await self.graph_client.graph_request(f"{root}:/workbook/worksheets")
        logger.info(f"Worksheets result: {json.dumps(worksheets)}")
        results["worksheets"] = _first_json(self.name, "worksheets", worksheets)

        cell_range = await self.graph_client.graph_request(
            f"{root}:/workbook/worksheets/Sheet1/range(address='A1:C5')"
        )
        logger.info(f"Range result: {json.dumps(cell_range)}")
        results["range"] = _first_json(self.name, "range", cell_range)

        return {"content": [text_content(json.dumps(results, indent=2))], "isError": False}
