"""Current-time context block prepended to calendar responses."""

from datetime import datetime, timezone


def timezone_name(now: datetime) -> str:
    """Get the IANA key of ``now``'s timezone, or its abbreviation."""
    return getattr(now.tzinfo, "key", None) or now.tzname() or "UTC"


def to_utc_iso(moment: datetime) -> str:
    """Format an instant as UTC ISO 8601 with millisecond precision and ``Z``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_current_time_info(now: datetime) -> str:
    """
    Render the current time in human-readable and ISO form.

    Args:
        now: Timezone-aware reference time

    Returns:
        Three-line block: human-readable time, ISO instant, timezone
    """
    readable = (
        f"{now:%A, %B} {now.day}, {now:%Y} at "
        f"{now:%I:%M:%S %p} {now.tzname() or 'UTC'}"
    )
    return (
        f"Current time: {readable}\n"
        f"ISO format: {to_utc_iso(now)}\n"
        f"Timezone: {timezone_name(now)}"
    )
