"""Base tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from ..context.models import RequestContext


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    data: Any
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def text(self) -> str:
        """Get the display text: the message on success, else the error."""
        return (self.message if self.success else self.error) or ""


class BaseTool(ABC):
    """Abstract base class for all tools."""

    # Pydantic model describing the tool's parameters
    request_model: Type[BaseModel]

    def __init__(self, name: str, description: str):
        """
        Initialize tool.

        Args:
            name: Tool name (used for registration)
            description: Tool description
        """
        self.name = name
        self.description = description

    @abstractmethod
    async def execute(self, context: RequestContext, **kwargs) -> ToolResult:
        """
        Execute the tool for a request.

        Args:
            context: Request context with timezone and calendars
            **kwargs: Tool-specific parameters

        Returns:
            ToolResult with execution result
        """
        pass

    def get_schema(self) -> Dict[str, Any]:
        """
        Generate tool schema from the request model.

        Returns:
            Dictionary with tool schema definition
        """
        json_schema = self.request_model.model_json_schema()
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": json_schema.get("properties", {}),
                "required": json_schema.get("required", []),
            },
        }

    def get_name(self) -> str:
        """Get tool name."""
        return self.name

    def get_description(self) -> str:
        """Get tool description."""
        return self.description
