"""Tests for the fan-out search orchestrator."""

from datetime import datetime, timedelta, timezone

import pytest

from conftest import FakeCalendarBackend, make_event
from calendar_agent.calendar.search import (
    EventSearchOrchestrator,
    normalize_calendar_ids,
)
from calendar_agent.calendar.time_window import PaddedKeywordWindow
from calendar_agent.calendar.variations import generate_name_variations


@pytest.fixture
def orchestrator():
    return EventSearchOrchestrator()


class TestVariantPlanning:
    """Tests for which text filters a query is searched with."""

    @pytest.mark.asyncio
    async def test_name_search_uses_variations(self, orchestrator, now, fake_backend):
        result = await orchestrator.search("sendblue", now, ["primary"], fake_backend)

        queried = [call["q"] for call in fake_backend.list_calls]
        assert queried == generate_name_variations("sendblue")
        assert result.variants == queried

    @pytest.mark.asyncio
    async def test_current_moment_searches_unfiltered(self, orchestrator, now, fake_backend):
        await orchestrator.search("where am I right now", now, ["primary"], fake_backend)

        assert len(fake_backend.list_calls) == 1
        call = fake_backend.list_calls[0]
        assert call["q"] == ""
        time_min = datetime.fromisoformat(call["time_min"])
        time_max = datetime.fromisoformat(call["time_max"])
        assert time_max - time_min == timedelta(hours=1, minutes=30)

    @pytest.mark.asyncio
    async def test_long_query_is_not_exploded(self, orchestrator, now, fake_backend):
        await orchestrator.search("meetings next week with john", now, None, fake_backend)

        assert [call["q"] for call in fake_backend.list_calls] == [
            "meetings next week with john"
        ]
        assert fake_backend.list_calls[0]["time_min"] == "2024-03-17T00:00:00.000+00:00"

    @pytest.mark.asyncio
    async def test_special_characters_pass_through(self, orchestrator, now, fake_backend):
        await orchestrator.search("meeting@company.com", now, None, fake_backend)

        assert any(call["q"] == "meeting@company.com" for call in fake_backend.list_calls)

    @pytest.mark.asyncio
    async def test_call_parameters(self, orchestrator, now, fake_backend):
        await orchestrator.search("meeting today", now, None, fake_backend)

        call = fake_backend.list_calls[0]
        assert call["calendar_id"] == "primary"
        assert call["single_events"] is True
        assert call["order_by"] == "startTime"
        assert call["max_results"] == 50
        assert call["time_min"] == "2024-03-15T00:00:00.000+00:00"
        assert call["time_max"] == "2024-03-15T23:59:59.999+00:00"


class TestFanOut:
    """Tests for multi-calendar fan-out and failure handling."""

    @pytest.mark.asyncio
    async def test_searches_every_calendar_variant_pair(self, orchestrator, now, fake_backend):
        await orchestrator.search("test query", now, ["cal1", "cal2"], fake_backend)

        variants = generate_name_variations("test query")
        assert len(fake_backend.list_calls) == 2 * len(variants)
        assert {call["calendar_id"] for call in fake_backend.list_calls} == {"cal1", "cal2"}

    @pytest.mark.asyncio
    async def test_total_failure_returns_empty_results_and_errors(self, orchestrator, now):
        backend = FakeCalendarBackend(list_error=RuntimeError("API Error"))

        result = await orchestrator.search("test query", now, ["cal1", "cal2"], backend)

        variants = generate_name_variations("test query")
        assert result.events == []
        assert len(result.errors) == 2 * len(variants)
        assert result.errors[0].calendar_id == "cal1"
        assert result.errors[0].message == "Error searching calendar cal1: API Error"
        assert result.errors[-1].calendar_id == "cal2"

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_other_results(self, orchestrator, now):
        backend = FakeCalendarBackend(
            events={"good": [make_event("e1", "2024-03-15T14:00:00Z")]},
            failing_calendars=["bad"],
        )

        result = await orchestrator.search(
            "where am i", now, ["bad", "good"], backend
        )

        assert [event.id for event in result.events] == ["e1"]
        assert len(result.errors) == 1
        assert result.errors[0].message.startswith("Error searching calendar bad:")

    @pytest.mark.asyncio
    async def test_sequential_mode_matches_concurrent(self, now):
        events = {"primary": [make_event("e1", "2024-03-15T14:00:00Z")]}
        concurrent = await EventSearchOrchestrator().search(
            "acme", now, None, FakeCalendarBackend(events=events)
        )
        sequential = await EventSearchOrchestrator(concurrent=False).search(
            "acme", now, None, FakeCalendarBackend(events=events)
        )

        assert concurrent.events == sequential.events
        assert concurrent.variants == sequential.variants


class TestMerge:
    """Tests for deduplication and ordering of merged results."""

    @pytest.mark.asyncio
    async def test_duplicate_ids_across_calendars_collapse(self, orchestrator, now):
        shared = make_event("dup", "2024-03-15T14:00:00Z", summary="From cal1")
        backend = FakeCalendarBackend(
            events={
                "cal1": [shared],
                "cal2": [make_event("dup", "2024-03-15T14:00:00Z", summary="From cal2")],
            }
        )

        result = await orchestrator.search("acme", now, ["cal1", "cal2"], backend)

        assert [event.id for event in result.events] == ["dup"]
        assert result.events[0].summary == "From cal1"

    @pytest.mark.asyncio
    async def test_results_sorted_by_start(self, orchestrator, now):
        backend = FakeCalendarBackend(
            events={
                "cal1": [make_event("t3", "2024-03-17T09:00:00Z")],
                "cal2": [
                    make_event("t2", "2024-03-16T12:00:00+02:00"),
                    make_event("t1", "2024-03-15T11:00:00Z"),
                ],
            }
        )

        result = await orchestrator.search("where am i", now, ["cal1", "cal2"], backend)

        assert [event.id for event in result.events] == ["t1", "t2", "t3"]

    @pytest.mark.asyncio
    async def test_all_day_events_sort_at_midnight(self, orchestrator, now):
        backend = FakeCalendarBackend(
            events={
                "primary": [
                    make_event("timed", "2024-03-16T09:00:00Z"),
                    make_event("allday", "2024-03-16"),
                    make_event("earlier", "2024-03-15T23:00:00Z"),
                ]
            }
        )

        result = await orchestrator.search("offsite", now, None, backend)

        assert [event.id for event in result.events] == ["earlier", "allday", "timed"]


class TestWindowModes:
    """Tests for selecting the window strategy."""

    @pytest.mark.asyncio
    async def test_padded_mode(self, now, fake_backend):
        orchestrator = EventSearchOrchestrator(window_strategy=PaddedKeywordWindow())

        result = await orchestrator.search("acme tomorrow", now, None, fake_backend)

        assert result.window.time_max - result.window.time_min == timedelta(days=3)

    @pytest.mark.asyncio
    async def test_naive_reference_time_is_treated_as_utc(self, orchestrator, fake_backend):
        result = await orchestrator.search(
            "today", datetime(2024, 3, 15, 10, 0), None, fake_backend
        )

        assert result.query.reference_now.tzinfo == timezone.utc


def test_normalize_calendar_ids():
    assert normalize_calendar_ids(None) == ["primary"]
    assert normalize_calendar_ids([]) == ["primary"]
    assert normalize_calendar_ids(["a", "b", "a", ""]) == ["a", "b"]
