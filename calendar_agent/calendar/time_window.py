"""Time window inference from temporal keywords in a search query."""

import calendar
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta
from typing import Dict, Optional, Tuple

from .models import TimeWindow

CURRENT_MOMENT_KEYWORDS = ("now", "current time", "current event", "where am i")

# Priority order, first match wins
TIME_KEYWORDS = (
    "today",
    "tomorrow",
    "yesterday",
    "this week",
    "next week",
    "last week",
    "this month",
    "next month",
)

END_OF_DAY = time(23, 59, 59, 999000)

PROBE_BEFORE = timedelta(hours=1)
PROBE_AFTER = timedelta(minutes=30)
DEFAULT_SPAN = timedelta(days=15)

NAME_SEARCH_SPAN = timedelta(days=30)
KEYWORD_BUFFERS: Dict[str, timedelta] = {
    "tomorrow": timedelta(days=3),
    "this week": timedelta(days=10),
    "next week": timedelta(days=14),
    "this month": timedelta(days=45),
    "next month": timedelta(days=45),
}
DEFAULT_BUFFER = timedelta(days=7)

# Padded windows for these keywords start later than the calendar-aligned ones
PADDED_START_SHIFTS = {"next week": timedelta(days=7)}


def is_current_moment_query(text: str) -> bool:
    """Check whether a query asks about the present moment ("where am I")."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in CURRENT_MOMENT_KEYWORDS)


def find_time_keyword(text: str) -> Optional[str]:
    """Get the highest-priority temporal keyword contained in ``text``."""
    lowered = (text or "").lower()
    for keyword in TIME_KEYWORDS:
        if keyword in lowered:
            return keyword
    return None


def _day_bounds(day: date, tz) -> Tuple[datetime, datetime]:
    return (
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day, END_OF_DAY, tzinfo=tz),
    )


def _span_bounds(first: date, last: date, tz) -> Tuple[datetime, datetime]:
    return (
        datetime.combine(first, time.min, tzinfo=tz),
        datetime.combine(last, END_OF_DAY, tzinfo=tz),
    )


def _sunday_weekday(moment: datetime) -> int:
    """Weekday index with Sunday as 0."""
    return (moment.weekday() + 1) % 7


def _month_bounds(year: int, month: int, tz) -> Tuple[datetime, datetime]:
    last_day = calendar.monthrange(year, month)[1]
    return _span_bounds(date(year, month, 1), date(year, month, last_day), tz)


def keyword_bounds(keyword: str, now: datetime) -> Tuple[datetime, datetime]:
    """
    Get the calendar-aligned bounds for a temporal keyword.

    Args:
        keyword: One of TIME_KEYWORDS
        now: Reference time; its tzinfo defines local midnight

    Returns:
        (start, end) with end at 23:59:59.999 of the last day
    """
    tz = now.tzinfo
    today = now.date()
    week_start = today - timedelta(days=_sunday_weekday(now))

    if keyword == "today":
        return _day_bounds(today, tz)
    if keyword == "tomorrow":
        return _day_bounds(today + timedelta(days=1), tz)
    if keyword == "yesterday":
        return _day_bounds(today - timedelta(days=1), tz)
    if keyword == "this week":
        return _span_bounds(week_start, week_start + timedelta(days=6), tz)
    if keyword == "next week":
        first = today + timedelta(days=7 - _sunday_weekday(now))
        return _span_bounds(first, first + timedelta(days=6), tz)
    if keyword == "last week":
        return _span_bounds(
            week_start - timedelta(days=7), week_start - timedelta(days=1), tz
        )
    if keyword == "this month":
        return _month_bounds(today.year, today.month, tz)
    if keyword == "next month":
        if today.month == 12:
            return _month_bounds(today.year + 1, 1, tz)
        return _month_bounds(today.year, today.month + 1, tz)
    raise ValueError(f"Unknown time keyword: {keyword}")


class TimeWindowStrategy(ABC):
    """Maps a raw query and a reference time to a search window."""

    name: str = ""

    @abstractmethod
    def resolve(self, raw_text: str, now: datetime) -> TimeWindow:
        pass


class PreciseCalendarWindow(TimeWindowStrategy):
    """
    Calendar-aligned windows.

    "now"-style queries probe one hour back and thirty minutes ahead, keyword
    queries cover exactly the named day, week or month, and anything else
    searches fifteen days either side of ``now``.
    """

    name = "precise"

    def resolve(self, raw_text: str, now: datetime) -> TimeWindow:
        text = (raw_text or "").strip()
        if is_current_moment_query(text):
            return TimeWindow(now - PROBE_BEFORE, now + PROBE_AFTER)

        keyword = find_time_keyword(text)
        if keyword:
            return TimeWindow(*keyword_bounds(keyword, now))

        return TimeWindow(now - DEFAULT_SPAN, now + DEFAULT_SPAN)


class PaddedKeywordWindow(TimeWindowStrategy):
    """
    Single padded windows for keyword-style searches.

    Short queries without a temporal keyword look from the start of yesterday
    thirty days ahead. Keyword queries start where the calendar-aligned
    window starts (a week later for "next week") and extend by a per-keyword
    buffer. Other queries use the
    calendar-aligned policy.
    """

    name = "padded"

    def __init__(self, fallback: Optional[TimeWindowStrategy] = None):
        self.fallback = fallback or PreciseCalendarWindow()

    def resolve(self, raw_text: str, now: datetime) -> TimeWindow:
        text = (raw_text or "").strip()
        if is_current_moment_query(text):
            return self.fallback.resolve(text, now)

        keyword = find_time_keyword(text)
        if keyword is None:
            if len(text.split()) <= 2:
                start = datetime.combine(
                    now.date() - timedelta(days=1), time.min, tzinfo=now.tzinfo
                )
                return TimeWindow(start, start + NAME_SEARCH_SPAN)
            return self.fallback.resolve(text, now)

        start, _ = keyword_bounds(keyword, now)
        start += PADDED_START_SHIFTS.get(keyword, timedelta(0))
        return TimeWindow(start, start + KEYWORD_BUFFERS.get(keyword, DEFAULT_BUFFER))


STRATEGIES = {
    PreciseCalendarWindow.name: PreciseCalendarWindow,
    PaddedKeywordWindow.name: PaddedKeywordWindow,
}


def get_strategy(name: str) -> TimeWindowStrategy:
    """Get a window strategy by its configured name."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown window mode: {name}") from None
