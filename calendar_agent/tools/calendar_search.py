"""Enhanced Google Calendar search tool."""

import asyncio
import logging
from typing import Callable, List, Optional

from pydantic import BaseModel, Field, ValidationError

from ..calendar.backend import CalendarBackend
from ..calendar.errors import classify_error, search_error_message
from ..calendar.formatting import format_search_results
from ..calendar.search import EventSearchOrchestrator
from ..calendar.time_info import format_current_time_info
from ..context.models import RequestContext
from .base import BaseTool, ToolResult

logger = logging.getLogger(__name__)


class CalendarSearchRequest(BaseModel):
    """Parameters for a calendar search."""

    query: str = Field(
        default="",
        description=(
            "What to look for: a company or person name, a phrase like "
            "'meeting tomorrow', or 'where am I' for the current event"
        ),
    )
    calendar_ids: Optional[List[str]] = Field(
        default=None,
        description="Calendars to search (default: configured calendars)",
    )


class CalendarSearchTool(BaseTool):
    """Tool for fuzzy, time-aware search of Google Calendar events."""

    request_model = CalendarSearchRequest

    def __init__(
        self,
        backend_provider: Callable[[], CalendarBackend],
        orchestrator: Optional[EventSearchOrchestrator] = None,
        calendar_ids: Optional[List[str]] = None,
    ):
        """
        Initialize Calendar Search tool.

        Args:
            backend_provider: Returns a connected backend; raises when no
                credential is available. Called in a worker thread since it
                may block on credential I/O
            orchestrator: Search orchestrator (default: calendar-aligned windows)
            calendar_ids: Default calendars to search
        """
        super().__init__(
            name="enhanced_google_calendar_view",
            description=(
                "Get events from Google Calendar with advanced search "
                "capabilities and current time awareness."
            ),
        )
        self.backend_provider = backend_provider
        self.orchestrator = orchestrator or EventSearchOrchestrator()
        self.calendar_ids = calendar_ids or []

    async def execute(self, context: RequestContext, **kwargs) -> ToolResult:
        """
        Search calendar events.

        Args:
            context: Request context
            **kwargs:
                - query (str): Search text
                - calendar_ids (list, optional): Calendars to search

        Returns:
            ToolResult with display text and the merged result set
        """
        try:
            request = CalendarSearchRequest(**kwargs)
        except ValidationError as e:
            return ToolResult(
                success=False,
                data=None,
                error=f"Invalid search parameters: {e}",
            )

        now = context.reference_now()
        calendar_ids = request.calendar_ids or context.calendar_ids or self.calendar_ids

        try:
            backend = await asyncio.to_thread(self.backend_provider)
        except Exception as e:
            logger.error(f"Enhanced calendar search error: {e}")
            kind = classify_error(e)
            return ToolResult(
                success=False,
                data={"error_kind": kind.value},
                error=(
                    f"{format_current_time_info(now)}\n\n"
                    f"{search_error_message(kind)}\nDetails: {e}"
                ),
            )

        result = await self.orchestrator.search(
            request.query, now, calendar_ids, backend
        )
        return ToolResult(
            success=True,
            data=result.to_dict(),
            message=format_search_results(result),
        )
