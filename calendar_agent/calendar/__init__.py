"""Calendar search and event creation core."""

from .backend import CalendarBackend, GoogleCalendarBackend, GoogleCredentialsProvider
from .creation import EventCreationAssistant, extract_attendees, parse_event_details
from .errors import CalendarBackendError, CredentialsError, ErrorKind, classify_error
from .formatting import format_creation_outcome, format_search_results
from .models import (
    AttendeeSet,
    CalendarEvent,
    EventCreated,
    EventCreatedWithAttendeeFailure,
    EventCreationFailed,
    SearchResultSet,
    TimeWindow,
)
from .search import EventSearchOrchestrator
from .time_info import format_current_time_info
from .time_window import PaddedKeywordWindow, PreciseCalendarWindow, get_strategy
from .variations import generate_name_variations

__all__ = [
    "CalendarBackend",
    "GoogleCalendarBackend",
    "GoogleCredentialsProvider",
    "EventCreationAssistant",
    "extract_attendees",
    "parse_event_details",
    "CalendarBackendError",
    "CredentialsError",
    "ErrorKind",
    "classify_error",
    "format_creation_outcome",
    "format_search_results",
    "AttendeeSet",
    "CalendarEvent",
    "EventCreated",
    "EventCreatedWithAttendeeFailure",
    "EventCreationFailed",
    "SearchResultSet",
    "TimeWindow",
    "EventSearchOrchestrator",
    "format_current_time_info",
    "PaddedKeywordWindow",
    "PreciseCalendarWindow",
    "get_strategy",
    "generate_name_variations",
]
