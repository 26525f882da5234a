"""Data models for calendar search and event creation."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import ErrorKind


@dataclass(frozen=True)
class SearchQuery:
    """A raw search query anchored to a reference time."""

    raw_text: str
    reference_now: datetime

    def __post_init__(self):
        object.__setattr__(self, "raw_text", (self.raw_text or "").strip())

    @property
    def words(self) -> List[str]:
        return self.raw_text.split()


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive [time_min, time_max] bound for a calendar search."""

    time_min: datetime
    time_max: datetime

    def __post_init__(self):
        if self.time_min > self.time_max:
            raise ValueError(
                f"time_min {self.time_min} is after time_max {self.time_max}"
            )

    def to_api(self) -> Tuple[str, str]:
        """Get both bounds as RFC 3339 strings with millisecond precision."""
        return (
            self.time_min.isoformat(timespec="milliseconds"),
            self.time_max.isoformat(timespec="milliseconds"),
        )


@dataclass(frozen=True)
class EventTime:
    """Start or end of an event: a timed instant or an all-day date."""

    date_time: Optional[datetime] = None
    day: Optional[date] = None

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> Optional["EventTime"]:
        if not payload:
            return None
        if payload.get("dateTime"):
            return cls(date_time=parse_datetime(payload["dateTime"]))
        if payload.get("date"):
            return cls(day=date.fromisoformat(payload["date"]))
        return None

    @property
    def is_all_day(self) -> bool:
        return self.date_time is None and self.day is not None

    def instant(self, tz=None) -> Optional[datetime]:
        """
        Get the comparable instant for this time.

        All-day dates resolve to midnight of that date in ``tz``.
        """
        if self.date_time is not None:
            return self.date_time
        if self.day is not None:
            return datetime.combine(self.day, time.min, tzinfo=tz)
        return None


@dataclass(frozen=True)
class Attendee:
    email: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.email or self.display_name or ""


@dataclass(frozen=True)
class CalendarEvent:
    """A read-only view of a calendar event. Identity is ``id``."""

    id: str
    summary: Optional[str] = None
    start: Optional[EventTime] = None
    end: Optional[EventTime] = None
    location: Optional[str] = None
    attendees: Tuple[Attendee, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "CalendarEvent":
        """Build an event from a Google Calendar API resource."""
        attendees = tuple(
            Attendee(
                email=item.get("email", ""),
                display_name=item.get("displayName"),
            )
            for item in payload.get("attendees") or []
        )
        return cls(
            id=payload.get("id", ""),
            summary=payload.get("summary"),
            start=EventTime.from_api(payload.get("start")),
            end=EventTime.from_api(payload.get("end")),
            location=payload.get("location") or None,
            attendees=attendees,
            raw=payload,
        )

    def effective_start(self, tz=None) -> datetime:
        """Ordering key: the start instant, or midnight for all-day events."""
        instant = self.start.instant(tz) if self.start else None
        if instant is None:
            return datetime.max.replace(tzinfo=tz)
        if instant.tzinfo is None and tz is not None:
            return instant.replace(tzinfo=tz)
        return instant


@dataclass(frozen=True)
class ErrorLogEntry:
    calendar_id: str
    message: str


@dataclass
class SearchResultSet:
    """Merged search outcome: deduplicated, ordered events plus failures."""

    query: SearchQuery
    window: TimeWindow
    variants: List[str]
    events: List[CalendarEvent] = field(default_factory=list)
    errors: List[ErrorLogEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        time_min, time_max = self.window.to_api()
        return {
            "query": self.query.raw_text,
            "time_range": {"min": time_min, "max": time_max},
            "variants": list(self.variants),
            "events": [event.raw or {"id": event.id} for event in self.events],
            "count": len(self.events),
            "errors": [
                {"calendar_id": entry.calendar_id, "message": entry.message}
                for entry in self.errors
            ],
        }


@dataclass(frozen=True)
class AttendeeSet:
    """Attendee candidates from a creation request, split by email shape."""

    candidates: Tuple[str, ...] = ()
    valid: Tuple[str, ...] = ()
    invalid: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.valid)


@dataclass(frozen=True)
class EventCreated:
    event_id: str
    summary: str
    start: Optional[EventTime]
    end: Optional[EventTime]
    location: Optional[str] = None
    attendees: AttendeeSet = AttendeeSet()


@dataclass(frozen=True)
class EventCreatedWithAttendeeFailure(EventCreated):
    """The event exists but attendees could not be attached."""

    reason: str = ""


@dataclass(frozen=True)
class EventCreationFailed:
    error_kind: ErrorKind
    message: str


EventCreationOutcome = Union[
    EventCreated, EventCreatedWithAttendeeFailure, EventCreationFailed
]


def parse_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing ``Z`` for UTC."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
