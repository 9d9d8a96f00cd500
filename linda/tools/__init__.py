"""Linda tools."""

from linda.tools.base import BaseTool, ToolResult
from linda.tools.docs import ReadDocTool
from linda.tools.github_commit import CommitFileTool
from linda.tools.notify import TelegramNotifyTool
from linda.tools.search import WebSearchTool
from linda.tools.sheets import SheetAppendTool

__all__ = [
    "BaseTool",
    "ToolResult",
    "ReadDocTool",
    "CommitFileTool",
    "TelegramNotifyTool",
    "WebSearchTool",
    "SheetAppendTool",
]
