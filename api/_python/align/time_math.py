"""
Time-of-day and timestamp calculations.

Two interval representations are used throughout the engine:
- Wall-clock "HH:MM" strings (break classification, mode windows)
- Absolute timestamps (governor evaluation for a calendar day)

Helpers here convert between them. Nothing in this module validates input;
callers are expected to pass well-formed values.
"""

from datetime import UTC, date, datetime, time, timedelta

import pytz

from .types import TimeWindow

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(time_str: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    Hours above 23 are allowed ("24:00", "25:30") so that windows crossing
    midnight can be expressed on a single timeline.
    """
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (no wrap-around, 1440 -> "24:00")."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start: str, end: str) -> int:
    """
    Minutes between two "HH:MM" times.

    Negative when end is before start; midnight crossing is not corrected here.
    """
    return time_to_minutes(end) - time_to_minutes(start)


def normalize_window(window: TimeWindow) -> TimeWindow:
    """
    Express a window that crosses midnight with an end past "24:00".

    22:00-01:00 becomes 22:00-25:00. Windows already in order are returned as-is.
    """
    start = time_to_minutes(window.start)
    end = time_to_minutes(window.end)
    if end > start:
        return window
    return TimeWindow(start=window.start, end=minutes_to_time(end + MINUTES_PER_DAY))


def windows_overlap(a: TimeWindow, b: TimeWindow) -> bool:
    """Strict overlap check; windows that only touch do not overlap."""
    return time_to_minutes(a.start) < time_to_minutes(b.end) and time_to_minutes(
        b.start
    ) < time_to_minutes(a.end)


def intersect(a: TimeWindow, b: TimeWindow) -> TimeWindow | None:
    """
    Overlap of two windows, or None if they are disjoint.

    Touching endpoints (a.end == b.start) count as no overlap.
    """
    start = max(time_to_minutes(a.start), time_to_minutes(b.start))
    end = min(time_to_minutes(a.end), time_to_minutes(b.end))
    if start >= end:
        return None
    return TimeWindow(start=minutes_to_time(start), end=minutes_to_time(end))


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting a trailing "Z" for UTC."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_utc(value: str | datetime) -> datetime:
    """
    Timezone-aware UTC datetime for an ISO string or datetime.

    Naive values are read as UTC, so naive and offset timestamps can be
    compared and subtracted on one timeline.
    """
    dt = parse_iso_datetime(value) if isinstance(value, str) else value
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_iso_timestamp(dt: datetime) -> str:
    """
    Format as a UTC timestamp with millisecond precision, e.g. "2024-01-15T08:00:00.000Z".

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(UTC)
    return dt.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def get_current_iso_timestamp() -> str:
    """Current time as a UTC ISO timestamp (shape of computed_at)."""
    return format_iso_timestamp(datetime.now(UTC))


def to_local_hhmm(value: str | datetime, tz_name: str | None = None) -> str:
    """
    Wall-clock "HH:MM" for an absolute timestamp.

    Args:
        value: ISO string or datetime
        tz_name: IANA timezone to view the timestamp in. When omitted, the
            timestamp's own offset (or naive wall clock) is used.

    Returns:
        "HH:MM" in the requested timezone
    """
    dt = parse_iso_datetime(value) if isinstance(value, str) else value
    if tz_name is not None:
        tz = pytz.timezone(tz_name)
        if dt.tzinfo is None:
            dt = pytz.UTC.localize(dt)
        dt = dt.astimezone(tz)
    return f"{dt.hour:02d}:{dt.minute:02d}"


def localize_day_time(day_iso: str, hhmm: str, tz_name: str | None = None) -> datetime:
    """
    Absolute datetime for a wall-clock time on a calendar day.

    "24:00" and later roll over into the following day.

    Args:
        day_iso: "YYYY-MM-DD"
        hhmm: "HH:MM" (may exceed 23:59)
        tz_name: IANA timezone; when omitted the result is naive

    Returns:
        Naive datetime, or timezone-aware datetime localized with pytz
    """
    day = date.fromisoformat(day_iso)
    naive = datetime.combine(day, time(0, 0)) + timedelta(minutes=time_to_minutes(hhmm))
    if tz_name is None:
        return naive
    return pytz.timezone(tz_name).localize(naive)


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end."""
    return int((end - start).total_seconds() // 60)
