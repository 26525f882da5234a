"""Tool system module."""

from .base import BaseTool, ToolResult
from .calendar_create import CalendarCreateTool
from .calendar_search import CalendarSearchTool
from .registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolResult",
    "CalendarCreateTool",
    "CalendarSearchTool",
    "ToolRegistry",
]
