"""Error taxonomy and message-based classification for calendar failures."""

from enum import Enum
from typing import Optional, Union


class ErrorKind(Enum):
    """Kinds of failure surfaced to the user."""

    AUTH_FAILURE = "auth_failure"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    BACKEND_UNAVAILABLE = "backend_unavailable"


class CalendarBackendError(Exception):
    """Raised by a backend when a calendar API call fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class CredentialsError(CalendarBackendError):
    """Raised when no usable calendar credential can be obtained."""


# Checked in order, first match wins.
_RULES = [
    (("invalid email",), ErrorKind.INVALID_INPUT),
    (("permission", "scope", "insufficient"), ErrorKind.PERMISSION_DENIED),
    (("rate limit", "quota"), ErrorKind.RATE_LIMITED),
    (("token", "authentication"), ErrorKind.AUTH_FAILURE),
    (("not found",), ErrorKind.NOT_FOUND),
]


def classify_error(error: Union[BaseException, str]) -> ErrorKind:
    """
    Classify an error by case-insensitive substring match on its message.

    Args:
        error: Exception or raw error message

    Returns:
        Matching ErrorKind, BACKEND_UNAVAILABLE when nothing matches
    """
    message = str(error).lower()
    for needles, kind in _RULES:
        if any(needle in message for needle in needles):
            return kind
    return ErrorKind.BACKEND_UNAVAILABLE


SEARCH_ERROR_MESSAGES = {
    ErrorKind.AUTH_FAILURE: (
        "I encountered an authentication issue when searching your calendar. "
        "Please try logging out and back in to refresh your access."
    ),
    ErrorKind.PERMISSION_DENIED: (
        "I don't have sufficient permissions to search your calendar. "
        "Please check your Google Calendar permissions."
    ),
    ErrorKind.RATE_LIMITED: (
        "I've hit a rate limit when searching your calendar. "
        "Please try again in a moment."
    ),
    ErrorKind.NOT_FOUND: (
        "I couldn't find the requested calendar. "
        "Please check the calendar configuration."
    ),
    ErrorKind.INVALID_INPUT: (
        "I couldn't understand that search. Please try a different query."
    ),
    ErrorKind.BACKEND_UNAVAILABLE: (
        "I encountered an issue when searching your calendar. "
        "Please try again with a more specific query."
    ),
}

CREATE_ERROR_MESSAGES = {
    ErrorKind.INVALID_INPUT: (
        "Error: One or more attendee email addresses are invalid. "
        "Please check the email addresses and try again."
    ),
    ErrorKind.PERMISSION_DENIED: (
        "Error: You don't have permission to create events in this calendar."
    ),
    ErrorKind.RATE_LIMITED: "Error: Calendar quota exceeded. Please try again later.",
    ErrorKind.AUTH_FAILURE: (
        "Error: Authentication failed. "
        "Please ensure you're logged in with Google Calendar access."
    ),
}


def search_error_message(kind: ErrorKind) -> str:
    """Get the user-facing message for a failed search."""
    return SEARCH_ERROR_MESSAGES[kind]


def create_error_message(kind: ErrorKind, detail: str) -> str:
    """Get the user-facing message for a failed event creation."""
    if kind in CREATE_ERROR_MESSAGES:
        return CREATE_ERROR_MESSAGES[kind]
    return (
        f"Error creating calendar event: {detail}. "
        "Please check the event details and try again."
    )
