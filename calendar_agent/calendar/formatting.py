"""Text rendering for search results and event creation outcomes."""

from datetime import datetime, tzinfo
from typing import List, Optional

from .models import (
    CalendarEvent,
    EventCreated,
    EventCreatedWithAttendeeFailure,
    EventCreationFailed,
    EventCreationOutcome,
    EventTime,
    SearchResultSet,
)
from .time_info import format_current_time_info

EVENT_SEPARATOR = "\n\n---\n\n"


def _clock(moment: datetime) -> str:
    return moment.strftime("%I:%M %p").lstrip("0")


def _localize(moment: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def format_event_start(start: Optional[EventTime], tz: Optional[tzinfo] = None) -> str:
    """Render an event start as ``date time`` or ``date (all day)``."""
    if start is None:
        return "Time not specified"
    if start.is_all_day:
        return f"{start.day:%a, %b} {start.day.day}, {start.day:%Y} (all day)"
    moment = _localize(start.date_time, tz)
    return f"{moment:%a, %b} {moment.day}, {moment:%Y} {_clock(moment)}"


def format_time_range(
    start: Optional[EventTime], end: Optional[EventTime], tz: Optional[tzinfo] = None
) -> str:
    """Render a start/end pair, e.g. ``Mon, Jan 15, 2:00 PM UTC - 3:00 PM UTC``."""
    if start is None or end is None:
        return "Time not specified"
    if start.is_all_day or end.is_all_day:
        return format_event_start(start, tz)

    begin = _localize(start.date_time, tz)
    finish = _localize(end.date_time, tz)
    zone = f" {begin.tzname()}" if begin.tzname() else ""
    end_zone = f" {finish.tzname()}" if finish.tzname() else ""
    return (
        f"{begin:%a, %b} {begin.day}, {_clock(begin)}{zone} - "
        f"{_clock(finish)}{end_zone}"
    )


def format_event(event: CalendarEvent, tz: Optional[tzinfo] = None) -> str:
    lines = [
        format_event_start(event.start, tz),
        event.summary or "No title",
    ]
    if event.location:
        lines.append(f"Location: {event.location}")
    labels = [attendee.label for attendee in event.attendees if attendee.label]
    if labels:
        lines.append(f"Attendees: {', '.join(labels)}")
    return "\n".join(lines)


def format_search_results(result: SearchResultSet) -> str:
    """
    Render a search result set for display.

    Args:
        result: Merged search results for one query

    Returns:
        Current-time header, matched events or a no-results line, any
        sub-search errors, and a variant note for single-word queries
    """
    now = result.query.reference_now
    tz = now.tzinfo
    query_text = result.query.raw_text
    sections: List[str] = [format_current_time_info(now)]

    count = len(result.events)
    if count:
        noun = "event" if count == 1 else "events"
        body = EVENT_SEPARATOR.join(format_event(event, tz) for event in result.events)
        sections.append(f'Found {count} {noun} matching "{query_text}":\n\n{body}')
    else:
        time_min, time_max = result.window.to_api()
        sections.append(
            f'No events found matching "{query_text}" between {time_min} and {time_max}.'
        )

    if result.errors:
        lines = "\n".join(f"- {entry.message}" for entry in result.errors)
        sections.append(f"Errors encountered:\n{lines}")

    if len(result.query.words) == 1:
        tried = ", ".join(result.variants)
        if count:
            sections.append(
                f'Note: I found these events by searching for variations of "{query_text}" '
                f"({tried}) across a wide date range."
            )
        else:
            sections.append(
                f'Note: I searched for "{query_text}" using multiple variations ({tried}), '
                "but couldn't find any matching events in your calendar. "
                "Try using a different keyword or check if the event exists."
            )

    return "\n\n".join(sections)


def format_creation_outcome(outcome: EventCreationOutcome, tz: Optional[tzinfo] = None) -> str:
    """Render an event creation outcome for display."""
    if isinstance(outcome, EventCreationFailed):
        return outcome.message

    lines = [
        f'Event "{outcome.summary}" created successfully.',
        f"Event ID: {outcome.event_id}",
        f"Time: {format_time_range(outcome.start, outcome.end, tz)}",
    ]
    if outcome.location:
        lines.append(f"Location: {outcome.location}")

    if isinstance(outcome, EventCreatedWithAttendeeFailure):
        lines.append(f"(Note: Event created but couldn't add attendees: {outcome.reason})")
    elif isinstance(outcome, EventCreated) and outcome.attendees:
        lines.append(f"Attendees invited: {', '.join(outcome.attendees.valid)}")
        lines.append("Email invitations sent to all attendees.")

    return "\n".join(lines)
