"""Enhanced Google Calendar create tool with attendee invitations."""

import asyncio
import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from ..calendar.backend import CalendarBackend
from ..calendar.creation import BaseEventCreator, EventCreationAssistant
from ..calendar.errors import classify_error, create_error_message
from ..calendar.formatting import format_creation_outcome
from ..calendar.models import EventCreatedWithAttendeeFailure, EventCreationFailed
from ..context.models import RequestContext
from .base import BaseTool, ToolResult

logger = logging.getLogger(__name__)


class CalendarCreateRequest(BaseModel):
    """Parameters for creating an event."""

    description: str = Field(
        ...,
        min_length=1,
        description=(
            "Event description. First line is the title; optional lines "
            "'Location: ...', 'Notes: ...' and 'Attendees: a@x.com, b@y.com'"
        ),
    )


class CalendarCreateTool(BaseTool):
    """Tool for creating Google Calendar events and inviting attendees."""

    request_model = CalendarCreateRequest

    def __init__(
        self,
        backend_provider: Callable[[], CalendarBackend],
        calendar_id: str = "primary",
        base_creator: Optional[BaseEventCreator] = None,
    ):
        """
        Initialize Calendar Create tool.

        Args:
            backend_provider: Returns a connected backend, called in a worker thread
            calendar_id: Calendar that receives new events
            base_creator: Optional replacement for the default event creator
        """
        super().__init__(
            name="enhanced_google_calendar_create",
            description=(
                "Create events in Google Calendar with support for adding "
                "attendees by email. Automatically sends email invitations."
            ),
        )
        self.backend_provider = backend_provider
        self.calendar_id = calendar_id
        self.base_creator = base_creator

    async def execute(self, context: RequestContext, **kwargs) -> ToolResult:
        """
        Create a calendar event.

        Args:
            context: Request context
            **kwargs:
                - description (str): Event description with optional attendee line

        Returns:
            ToolResult with the creation outcome
        """
        try:
            request = CalendarCreateRequest(**kwargs)
        except ValidationError as e:
            return ToolResult(
                success=False,
                data=None,
                error=f"Invalid event parameters: {e}",
            )

        now = context.reference_now()
        logger.info(f"Creating calendar event with input: {request.description!r}")

        try:
            backend = await asyncio.to_thread(self.backend_provider)
        except Exception as e:
            logger.error(f"Error creating calendar event: {e}")
            kind = classify_error(e)
            return ToolResult(
                success=False,
                data={"error_kind": kind.value},
                error=create_error_message(kind, str(e)),
            )

        assistant = EventCreationAssistant(
            backend, calendar_id=self.calendar_id, base_creator=self.base_creator
        )
        outcome = await assistant.create(request.description, now)
        text = format_creation_outcome(outcome, now.tzinfo)

        if isinstance(outcome, EventCreationFailed):
            return ToolResult(
                success=False,
                data={"error_kind": outcome.error_kind.value},
                error=text,
            )

        data = {
            "event_id": outcome.event_id,
            "summary": outcome.summary,
            "location": outcome.location,
            "attendees": list(outcome.attendees.valid),
            "invalid_attendees": list(outcome.attendees.invalid),
        }
        if isinstance(outcome, EventCreatedWithAttendeeFailure):
            data["attendee_error"] = outcome.reason
        return ToolResult(success=True, data=data, message=text)
