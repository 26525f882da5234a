"""Fan-out event search across calendars and name variants."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .backend import CalendarBackend
from .models import (
    CalendarEvent,
    ErrorLogEntry,
    SearchQuery,
    SearchResultSet,
    TimeWindow,
)
from .time_window import (
    PreciseCalendarWindow,
    TimeWindowStrategy,
    is_current_moment_query,
)
from .variations import generate_name_variations

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_MAX_RESULTS = 50

# Queries up to this many words are treated as names and expanded
NAME_SEARCH_MAX_WORDS = 3

logger = logging.getLogger(__name__)


@dataclass
class SubSearchOutcome:
    """Result of a single (calendar, variant) backend call."""

    calendar_id: str
    variant: str
    events: List[CalendarEvent] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_calendar_ids(calendar_ids: Optional[Iterable[str]]) -> List[str]:
    """Deduplicate calendar ids keeping order, defaulting to the primary calendar."""
    ids = [cid for cid in dict.fromkeys(calendar_ids or []) if cid]
    return ids or [DEFAULT_CALENDAR_ID]


def merge_events(outcomes: Iterable[SubSearchOutcome], tz=None) -> List[CalendarEvent]:
    """
    Merge sub-search results into one ordered list.

    Events are deduplicated by id (first occurrence wins) and sorted by
    effective start instant; the sort is stable so equal starts keep
    arrival order.
    """
    seen = {}
    for outcome in outcomes:
        for event in outcome.events:
            if event.id not in seen:
                seen[event.id] = event
    return sorted(seen.values(), key=lambda event: event.effective_start(tz))


class EventSearchOrchestrator:
    """Searches calendars for a free-text query with fuzzy name matching."""

    def __init__(
        self,
        window_strategy: Optional[TimeWindowStrategy] = None,
        max_results: int = DEFAULT_MAX_RESULTS,
        concurrent: bool = True,
    ):
        """
        Initialize orchestrator.

        Args:
            window_strategy: Time window policy (default: calendar-aligned)
            max_results: Maximum events requested per sub-search
            concurrent: Run sub-searches concurrently instead of one by one
        """
        self.window_strategy = window_strategy or PreciseCalendarWindow()
        self.max_results = max_results
        self.concurrent = concurrent

    def plan_variants(self, query: SearchQuery) -> List[str]:
        """Pick the text filters to search with for a query."""
        if is_current_moment_query(query.raw_text):
            return [""]
        if len(query.words) <= NAME_SEARCH_MAX_WORDS:
            return generate_name_variations(query.raw_text)
        return [query.raw_text]

    def resolve_window(self, query: SearchQuery) -> TimeWindow:
        return self.window_strategy.resolve(query.raw_text, query.reference_now)

    async def search(
        self,
        raw_query: str,
        now: datetime,
        calendar_ids: Optional[Iterable[str]],
        backend: CalendarBackend,
    ) -> SearchResultSet:
        """
        Search every (calendar, variant) pair and merge the results.

        Failed sub-searches are recorded in the result's error log; the
        fan-out always runs to completion and this method does not raise
        for backend failures.

        Args:
            raw_query: Query text as given by the caller
            now: Reference time
            calendar_ids: Calendars to search (default: primary)
            backend: Calendar backend to query

        Returns:
            SearchResultSet with merged events and the error log
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        query = SearchQuery(raw_query, now)
        window = self.resolve_window(query)
        variants = self.plan_variants(query)
        calendars = normalize_calendar_ids(calendar_ids)

        logger.info(
            f'Calendar search: expanded "{query.raw_text}" to {len(variants)} '
            f"variants across {len(calendars)} calendars"
        )

        pairs = [(cid, variant) for cid in calendars for variant in variants]
        if self.concurrent:
            outcomes = await asyncio.gather(
                *(self._sub_search(backend, cid, variant, window) for cid, variant in pairs)
            )
        else:
            outcomes = []
            for cid, variant in pairs:
                outcomes.append(await self._sub_search(backend, cid, variant, window))

        errors = [
            ErrorLogEntry(calendar_id=outcome.calendar_id, message=outcome.error)
            for outcome in outcomes
            if not outcome.ok
        ]
        events = merge_events(outcomes, tz=now.tzinfo)

        logger.debug(
            f"Calendar search finished: {len(events)} events, {len(errors)} errors"
        )
        return SearchResultSet(
            query=query,
            window=window,
            variants=variants,
            events=events,
            errors=errors,
        )

    async def _sub_search(
        self,
        backend: CalendarBackend,
        calendar_id: str,
        variant: str,
        window: TimeWindow,
    ) -> SubSearchOutcome:
        time_min, time_max = window.to_api()
        try:
            items = await backend.list_events(
                calendar_id=calendar_id,
                time_min=time_min,
                time_max=time_max,
                q=variant,
                single_events=True,
                order_by="startTime",
                max_results=self.max_results,
            )
            events = [CalendarEvent.from_api(item) for item in items or []]
        except Exception as e:
            logger.warning(
                f'Sub-search failed for calendar {calendar_id}, variant "{variant}": {e}'
            )
            return SubSearchOutcome(
                calendar_id=calendar_id,
                variant=variant,
                error=f"Error searching calendar {calendar_id}: {e}",
            )

        return SubSearchOutcome(calendar_id=calendar_id, variant=variant, events=events)
