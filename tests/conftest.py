"""Shared fixtures: an in-memory calendar backend."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from calendar_agent.calendar.backend import CalendarBackend


class FakeCalendarBackend(CalendarBackend):
    """In-memory CalendarBackend that records every call."""

    def __init__(
        self,
        events: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        list_error: Optional[Exception] = None,
        failing_calendars: Optional[List[str]] = None,
        insert_error: Optional[Exception] = None,
        attendee_insert_error: Optional[Exception] = None,
        get_error: Optional[Exception] = None,
        update_error: Optional[Exception] = None,
        insert_id: Optional[str] = "evt-1",
    ):
        self.events = events or {}
        self.list_error = list_error
        self.failing_calendars = failing_calendars or []
        self.insert_error = insert_error
        self.attendee_insert_error = attendee_insert_error
        self.get_error = get_error
        self.update_error = update_error
        self.insert_id = insert_id
        self.list_calls: List[Dict[str, Any]] = []
        self.insert_calls: List[Dict[str, Any]] = []
        self.get_calls: List[Dict[str, Any]] = []
        self.update_calls: List[Dict[str, Any]] = []
        self.stored: Dict[str, Dict[str, Any]] = {}

    async def list_events(
        self,
        calendar_id,
        time_min,
        time_max,
        q="",
        single_events=True,
        order_by="startTime",
        max_results=50,
    ):
        self.list_calls.append(
            {
                "calendar_id": calendar_id,
                "time_min": time_min,
                "time_max": time_max,
                "q": q,
                "single_events": single_events,
                "order_by": order_by,
                "max_results": max_results,
            }
        )
        if self.list_error:
            raise self.list_error
        if calendar_id in self.failing_calendars:
            raise RuntimeError(f"calendar {calendar_id} unavailable")
        return list(self.events.get(calendar_id, []))

    async def get_event(self, calendar_id, event_id):
        self.get_calls.append({"calendar_id": calendar_id, "event_id": event_id})
        if self.get_error:
            raise self.get_error
        return dict(self.stored[event_id])

    async def insert_event(
        self, calendar_id, body, send_updates=None, conference_data_version=None
    ):
        self.insert_calls.append(
            {
                "calendar_id": calendar_id,
                "body": body,
                "send_updates": send_updates,
                "conference_data_version": conference_data_version,
            }
        )
        if self.insert_error:
            raise self.insert_error
        if body.get("attendees") and self.attendee_insert_error:
            raise self.attendee_insert_error
        created = dict(body)
        if self.insert_id:
            created["id"] = self.insert_id
            self.stored[self.insert_id] = created
        return created

    async def update_event(self, calendar_id, event_id, body, send_updates=None):
        self.update_calls.append(
            {
                "calendar_id": calendar_id,
                "event_id": event_id,
                "body": body,
                "send_updates": send_updates,
            }
        )
        if self.update_error:
            raise self.update_error
        self.stored[event_id] = dict(body)
        return body


def make_event(event_id: str, start: str, summary: str = "Meeting", **extra) -> Dict[str, Any]:
    """Build a Google Calendar event resource; date-only starts are all-day."""
    key = "dateTime" if "T" in start else "date"
    event = {"id": event_id, "summary": summary, "start": {key: start}, "end": {key: start}}
    event.update(extra)
    return event


@pytest.fixture
def now():
    """Friday 2024-03-15 10:00 UTC."""
    return datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_backend():
    return FakeCalendarBackend()
