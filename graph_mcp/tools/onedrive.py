"""
OneDrive Upload Tools

Hand-authored helpers for creating files, which the generated catalog
cannot express (raw PUT bodies with an explicit content type).
"""

import logging
from typing import List

from ..base import MCPTool, ToolParameter, ToolResult, TransportAdapter
from ..normalizer import normalize_response

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def upload_path(file_name: str, folder_path: str = "/") -> str:
    """Drive path of the content stream for a file under folder_path."""
    if folder_path == "/":
        return f"/me/drive/root:/{file_name}:/content"
    return f"/me/drive/root:{folder_path}/{file_name}:/content"


class UploadFileTool(MCPTool):
    """Upload a new file to OneDrive."""

    def __init__(self, graph_client: TransportAdapter):
        self.graph_client = graph_client

    @property
    def name(self) -> str:
        return "upload-file-to-onedrive"

    @property
    def description(self) -> str:
        return "Upload a new file to OneDrive"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="fileName",
                schema={"type": "string"},
                description='Name of the file to create (e.g., "test.xlsx")',
                required=True,
            ),
            ToolParameter(
                name="content",
                schema={"type": "string"},
                description="File content (base64 encoded for binary files)",
                required=True,
            ),
            ToolParameter(
                name="folderPath",
                schema={"type": "string"},
                description="Folder path (default: root folder)",
                default="/",
            ),
            ToolParameter(
                name="contentType",
                schema={"type": "string"},
                description="MIME type of the file",
                default=XLSX_CONTENT_TYPE,
            ),
        ]

    @property
    def category(self) -> str:
        return "onedrive"

    async def execute(
        self,
        fileName: str,
        content: str,
        folderPath: str = "/",
        contentType: str = XLSX_CONTENT_TYPE,
    ) -> ToolResult:
        logger.info(f"Uploading file: {fileName} to folder: {folderPath}")
        response = await self.graph_client.graph_request(
            upload_path(fileName, folderPath),
            {
                "method": "PUT",
                "headers": {"Content-Type": contentType},
                "body": content,
            },
        )
        return normalize_response(response)


class CreateEmptyExcelFileTool(MCPTool):
    """Create an empty Excel file in OneDrive."""

    def __init__(self, graph_client: TransportAdapter):
        self.graph_client = graph_client

    @property
    def name(self) -> str:
        return "create-empty-excel-file"

    @property
    def description(self) -> str:
        return "Create an empty Excel file in OneDrive"

    @property
    def parameters(self) -> List[ToolParameter]:
        return [
            ToolParameter(
                name="fileName",
                schema={"type": "string"},
                description='Name of the Excel file (e.g., "MyWorkbook.xlsx")',
                required=True,
            ),
            ToolParameter(
                name="folderPath",
                schema={"type": "string"},
                description="Folder path (default: root folder)",
                default="/",
            ),
        ]

    @property
    def category(self) -> str:
        return "excel"

    async def execute(self, fileName: str, folderPath: str = "/") -> ToolResult:
        logger.info(f"Creating empty Excel file: {fileName} in folder: {folderPath}")
        # Graph materializes a minimal workbook for an empty xlsx upload.
        response = await self.graph_client.graph_request(
            upload_path(fileName, folderPath),
            {
                "method": "PUT",
                "headers": {"Content-Type": XLSX_CONTENT_TYPE},
                "body": "",
            },
        )
        return normalize_response(response)
