"""Data models for per-request context."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo


@dataclass
class RequestContext:
    """Context handed to a tool for a single request."""

    timezone: str = "UTC"
    calendar_ids: List[str] = field(default_factory=list)
    now: Optional[datetime] = None

    def reference_now(self) -> datetime:
        """
        Get the reference time for this request in the user's timezone.

        Returns:
            ``now`` converted to the user's timezone, or the current time
            when no fixed reference was given
        """
        tz = ZoneInfo(self.timezone)
        if self.now is None:
            return datetime.now(tz)
        if self.now.tzinfo is None:
            return self.now.replace(tzinfo=tz)
        return self.now.astimezone(tz)
