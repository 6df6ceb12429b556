"""
Graph Tools Package

- endpoint.py: GraphEndpointTool, one per catalog descriptor
- excel.py / onedrive.py: hand-authored auxiliary tools
"""

from .endpoint import GraphEndpointTool
from .excel import DebugExcelAccessTool
from .onedrive import CreateEmptyExcelFileTool, UploadFileTool

AUXILIARY_TOOLS = [
    DebugExcelAccessTool,
    UploadFileTool,
    CreateEmptyExcelFileTool,
]

__all__ = [
    "AUXILIARY_TOOLS",
    "CreateEmptyExcelFileTool",
    "DebugExcelAccessTool",
    "GraphEndpointTool",
    "UploadFileTool",
]
