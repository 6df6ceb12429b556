"""
Tests for the hand-authored OneDrive / Excel helper tools.
"""

import json

import pytest

from graph_mcp.tools.excel import DebugExcelAccessTool
from graph_mcp.tools.onedrive import (
    XLSX_CONTENT_TYPE,
    CreateEmptyExcelFileTool,
    UploadFileTool,
    upload_path,
)

from conftest import text_response


def _handler(tool):
    return tool.to_definition().handler


class TestUploadPath:

    def test_root_folder(self):
        assert upload_path("a.xlsx") == "/me/drive/root:/a.xlsx:/content"

    def test_sub_folder(self):
        assert upload_path("a.xlsx", "/Reports") == "/me/drive/root:/Reports/a.xlsx:/content"


class TestUploadFile:

    @pytest.mark.asyncio
    async def test_uploads_with_defaults(self, graph_client):
        graph_client.graph_request.return_value = text_response({"id": "item-1"})

        result = await _handler(UploadFileTool(graph_client))(fileName="notes.txt", content="hello")

        graph_client.graph_request.assert_awaited_once_with(
            "/me/drive/root:/notes.txt:/content",
            {"method": "PUT", "headers": {"Content-Type": XLSX_CONTENT_TYPE}, "body": "hello"},
        )
        assert json.loads(result["content"][0]["text"]) == {"id": "item-1"}

    @pytest.mark.asyncio
    async def test_custom_folder_and_type(self, graph_client):
        await _handler(UploadFileTool(graph_client))(
            fileName="notes.txt", content="hello", folderPath="/Docs", contentType="text/plain"
        )
        path, options = graph_client.graph_request.await_args.args
        assert path == "/me/drive/root:/Docs/notes.txt:/content"
        assert options["headers"] == {"Content-Type": "text/plain"}

    @pytest.mark.asyncio
    async def test_missing_content(self, graph_client):
        result = await _handler(UploadFileTool(graph_client))(fileName="notes.txt")
        assert result["isError"] is True
        assert "upload-file-to-onedrive" in json.loads(result["content"][0]["text"])["error"]

    def test_is_write_operation(self, graph_client):
        assert UploadFileTool(graph_client).read_only is False


class TestCreateEmptyExcelFile:

    @pytest.mark.asyncio
    async def test_puts_empty_body(self, graph_client):
        await _handler(CreateEmptyExcelFileTool(graph_client))(fileName="Book.xlsx")
        graph_client.graph_request.assert_awaited_once_with(
            "/me/drive/root:/Book.xlsx:/content",
            {"method": "PUT", "headers": {"Content-Type": XLSX_CONTENT_TYPE}, "body": ""},
        )

    @pytest.mark.asyncio
    async def test_transport_failure(self, graph_client):
        graph_client.graph_request.side_effect = RuntimeError("quota exceeded")
        result = await _handler(CreateEmptyExcelFileTool(graph_client))(fileName="Book.xlsx")
        assert result["isError"] is True
        assert json.loads(result["content"][0]["text"]) == {
            "error": "Error in tool create-empty-excel-file: quota exceeded"
        }


class TestDebugExcelAccess:

    @pytest.mark.asyncio
    async def test_combines_all_probes(self, graph_client):
        graph_client.graph_request.side_effect = [
            text_response({"name": "Book.xlsx"}),
            text_response({"id": "session-1", "persistChanges": False}),
            text_response({"value": [{"name": "Sheet1"}]}),
            text_response({"values": [[1, 2, 3]]}),
        ]

        result = await _handler(DebugExcelAccessTool(graph_client))(filePath="/Book.xlsx")

        assert result["isError"] is False
        combined = json.loads(result["content"][0]["text"])
        assert combined == {
            "fileInfo": {"name": "Book.xlsx"},
            "sessionResult": {"id": "session-1", "persistChanges": False},
            "worksheets": {"value": [{"name": "Sheet1"}]},
            "range": {"values": [[1, 2, 3]]},
        }

        paths = [call.args[0] for call in graph_client.graph_request.await_args_list]
        assert paths == [
            "/me/drive/root:/Book.xlsx",
            "/me/drive/root:/Book.xlsx:/workbook/createSession",
            "/me/drive/root:/Book.xlsx:/workbook/worksheets",
            "/me/drive/root:/Book.xlsx:/workbook/worksheets/Sheet1/range(address='A1:C5')",
        ]
        session_options = graph_client.graph_request.await_args_list[1].args[1]
        assert json.loads(session_options["body"]) == {"persistChanges": False}

    @pytest.mark.asyncio
    async def test_non_json_probe_is_an_error(self, graph_client):
        graph_client.graph_request.return_value = text_response("<html>denied</html>")

        result = await _handler(DebugExcelAccessTool(graph_client))(filePath="/Book.xlsx")

        assert result["isError"] is True
        assert "debug-excel-access" in json.loads(result["content"][0]["text"])["error"]

    def test_declares_read_only(self, graph_client):
        assert DebugExcelAccessTool(graph_client).read_only is True
