"""Event creation with attendee extraction and invitation delivery."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .backend import CalendarBackend
from .errors import classify_error, create_error_message
from .models import (
    AttendeeSet,
    EventCreated,
    EventCreatedWithAttendeeFailure,
    EventCreationFailed,
    EventCreationOutcome,
    EventTime,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ATTENDEE_PREFIXES = ("attendees:", "invite:")
LOCATION_PREFIXES = ("location:",)
DESCRIPTION_PREFIXES = ("description:", "notes:")
DEFAULT_SUMMARY = "New Event"

GUEST_SETTINGS = {
    "guestsCanInviteOthers": True,
    "guestsCanModify": False,
    "guestsCanSeeOtherGuests": True,
}

# Creates an event from a cleaned description and returns the API resource
BaseEventCreator = Callable[[str, datetime], Awaitable[Dict[str, Any]]]

logger = logging.getLogger(__name__)


def is_valid_email(email: str) -> bool:
    """Check the ``local@domain.tld`` shape."""
    return bool(EMAIL_PATTERN.match(email))


def _value_after_colon(line: str) -> str:
    return line[line.index(":") + 1 :].strip()


def extract_attendees(description: str) -> Tuple[AttendeeSet, str]:
    """
    Pull the attendee line out of an event description.

    The first line starting with ``attendees:`` or ``invite:`` (any case) is
    consumed and removed. Its comma-separated entries are trimmed, blanks are
    dropped, and the rest are split by email shape.

    Args:
        description: Raw event description

    Returns:
        (attendees, description without the attendee line)
    """
    lines = description.split("\n")
    for index, line in enumerate(lines):
        stripped = line.strip()
        if stripped.lower().startswith(ATTENDEE_PREFIXES):
            candidates = tuple(
                entry.strip()
                for entry in _value_after_colon(stripped).split(",")
                if entry.strip()
            )
            attendees = AttendeeSet(
                candidates=candidates,
                valid=tuple(email for email in candidates if is_valid_email(email)),
                invalid=tuple(email for email in candidates if not is_valid_email(email)),
            )
            cleaned = "\n".join(lines[:index] + lines[index + 1 :])
            return attendees, cleaned
    return AttendeeSet(), description


@dataclass
class EventDetails:
    """Minimal event fields parsed from a description."""

    summary: str
    start: datetime
    end: datetime
    description: str = ""
    location: str = ""

    def to_body(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "description": self.description,
            "location": self.location,
            "start": {"dateTime": self.start.isoformat()},
            "end": {"dateTime": self.end.isoformat()},
        }


def parse_event_details(text: str, now: datetime) -> EventDetails:
    """
    Parse summary, location and notes from an event description.

    The first line is the summary. Times are a placeholder: the next full
    hour after ``now``, one hour long.
    """
    lines = [line.strip() for line in text.split("\n")]
    summary = lines[0] if lines and lines[0] else DEFAULT_SUMMARY
    description = ""
    location = ""

    for line in lines:
        lowered = line.lower()
        if lowered.startswith(LOCATION_PREFIXES):
            location = _value_after_colon(line)
        elif lowered.startswith(DESCRIPTION_PREFIXES):
            description = _value_after_colon(line)

    start = (now + timedelta(hours=1)).replace(minute=0, second=0, microsecond=0)
    return EventDetails(
        summary=summary,
        start=start,
        end=start + timedelta(hours=1),
        description=description,
        location=location,
    )


def _attendee_entries(emails: Tuple[str, ...]) -> List[Dict[str, str]]:
    return [{"email": email, "responseStatus": "needsAction"} for email in emails]


class EventCreationAssistant:
    """Creates calendar events and invites the attendees listed in them."""

    def __init__(
        self,
        backend: CalendarBackend,
        calendar_id: str = "primary",
        base_creator: Optional[BaseEventCreator] = None,
    ):
        """
        Initialize creation assistant.

        Args:
            backend: Calendar backend
            calendar_id: Calendar that receives new events
            base_creator: Creates an event without attendees; defaults to
                inserting the fields parsed by parse_event_details
        """
        self.backend = backend
        self.calendar_id = calendar_id
        self.base_creator = base_creator or self._insert_parsed

    async def create(self, description: str, now: datetime) -> EventCreationOutcome:
        """
        Create an event from a description, inviting any listed attendees.

        Args:
            description: Event description, optionally with an attendee line
            now: Reference time

        Returns:
            EventCreated, EventCreatedWithAttendeeFailure if the event exists
            without its attendees, or EventCreationFailed
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        attendees, cleaned = extract_attendees(description)
        if attendees.invalid:
            logger.warning(f"Invalid email addresses dropped: {list(attendees.invalid)}")
        logger.info(f"Parsed attendees: {list(attendees.valid)}")

        if attendees:
            try:
                created = await self._insert_with_attendees(cleaned, now, attendees)
                logger.info(f"Event created with attendees: {created.get('id')}")
                return self._created(created, attendees)
            except Exception as e:
                logger.error(f"Error creating event with attendees, falling back: {e}")

        try:
            base_event = await self.base_creator(cleaned, now)
        except Exception as e:
            logger.error(f"Error creating calendar event: {e}")
            kind = classify_error(e)
            return EventCreationFailed(
                error_kind=kind, message=create_error_message(kind, str(e))
            )

        if not attendees:
            return self._created(base_event, attendees)

        event_id = base_event.get("id")
        if not event_id:
            return self._created(
                base_event,
                attendees,
                failure_reason="created event has no id to attach attendees to",
            )

        try:
            await self._attach_attendees(event_id, attendees)
        except Exception as e:
            logger.error(f"Error adding attendees to event {event_id}: {e}")
            return self._created(base_event, attendees, failure_reason=str(e))

        return self._created(base_event, attendees)

    async def _insert_parsed(self, description: str, now: datetime) -> Dict[str, Any]:
        details = parse_event_details(description, now)
        return await self.backend.insert_event(self.calendar_id, details.to_body())

    async def _insert_with_attendees(
        self, description: str, now: datetime, attendees: AttendeeSet
    ) -> Dict[str, Any]:
        body = parse_event_details(description, now).to_body()
        body["attendees"] = _attendee_entries(attendees.valid)
        body["reminders"] = {"useDefault": True}
        body.update(GUEST_SETTINGS)
        return await self.backend.insert_event(
            self.calendar_id,
            body,
            send_updates="all",
            conference_data_version=1,
        )

    async def _attach_attendees(self, event_id: str, attendees: AttendeeSet) -> None:
        event = await self.backend.get_event(self.calendar_id, event_id)
        event["attendees"] = _attendee_entries(attendees.valid)
        event.update(GUEST_SETTINGS)
        await self.backend.update_event(
            self.calendar_id, event_id, event, send_updates="all"
        )

    def _created(
        self,
        event: Dict[str, Any],
        attendees: AttendeeSet = AttendeeSet(),
        failure_reason: Optional[str] = None,
    ) -> EventCreated:
        fields = dict(
            event_id=event.get("id", ""),
            summary=event.get("summary") or DEFAULT_SUMMARY,
            start=EventTime.from_api(event.get("start")),
            end=EventTime.from_api(event.get("end")),
            location=event.get("location") or None,
            attendees=attendees,
        )
        if failure_reason is not None:
            return EventCreatedWithAttendeeFailure(reason=failure_reason, **fields)
        return EventCreated(**fields)
