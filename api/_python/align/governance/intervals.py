"""
Interval algebra for window subtraction.

Works on any ordered values: integer minutes for wall-clock windows and
datetimes for absolute windows share the same subtraction routine.

Boundary rules:
- Clipping uses strict overlap (touching intervals have no effect)
- Merging is inclusive (intervals that touch merge into one)
"""

from collections.abc import Iterable
from typing import TypeVar

from ..time_math import (
    format_iso_timestamp,
    minutes_between,
    minutes_to_time,
    time_to_minutes,
    to_utc,
)
from ..types import AvailableSegment, BaselineWindow, BusyBlock, TimeSegment, TimeWindow

T = TypeVar("T")

# Classifier-level viability threshold for a segment (minutes).
# Moderate-high evidence: working memory loading takes ~15-25 min, so
# 30 min covers ramp-up plus minimal productive time.
MIN_SEGMENT_MINUTES = 30


def clip_interval(start: T, end: T, window_start: T, window_end: T) -> tuple[T, T] | None:
    """Portion of [start, end) inside the window, or None if they don't overlap."""
    lo = max(start, window_start)
    hi = min(end, window_end)
    if lo >= hi:
        return None
    return (lo, hi)


def merge_intervals(intervals: Iterable[tuple[T, T]]) -> list[tuple[T, T]]:
    """
    Merge overlapping or touching intervals.

    [a, b) and [b, c) merge into [a, c).
    """
    merged: list[tuple[T, T]] = []
    for start, end in sorted(intervals, key=lambda interval: interval[0]):
        if merged and start <= merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def subtract_intervals(
    window_start: T, window_end: T, intervals: Iterable[tuple[T, T]]
) -> list[tuple[T, T]]:
    """
    Subtract unavailable intervals from a window.

    Args:
        window_start: Window start
        window_end: Window end
        intervals: Unavailable intervals in any order, possibly overlapping

    Returns:
        Ordered, disjoint, non-empty available sub-intervals
    """
    clipped = []
    for start, end in intervals:
        clipped_interval = clip_interval(start, end, window_start, window_end)
        if clipped_interval is not None:
            clipped.append(clipped_interval)

    gaps: list[tuple[T, T]] = []
    cursor = window_start
    for start, end in merge_intervals(clipped):
        if cursor < start:
            gaps.append((cursor, start))
        cursor = max(cursor, end)

    if cursor < window_end:
        gaps.append((cursor, window_end))

    return gaps


def _make_segment(start: int, end: int) -> AvailableSegment:
    duration = end - start
    return AvailableSegment(
        start=minutes_to_time(start),
        end=minutes_to_time(end),
        duration_minutes=duration,
        viable=duration >= MIN_SEGMENT_MINUTES,
    )


def calculate_segments(window: TimeWindow, breaks: Iterable[TimeWindow]) -> list[AvailableSegment]:
    """
    Available segments of a wall-clock window after removing breaks.

    With no breaks the whole window is returned as one segment, even if the
    caller passed an unnormalized (negative-length) window.
    """
    breaks = list(breaks)
    window_start = time_to_minutes(window.start)
    window_end = time_to_minutes(window.end)

    if not breaks:
        return [_make_segment(window_start, window_end)]

    gaps = subtract_intervals(
        window_start,
        window_end,
        ((time_to_minutes(b.start), time_to_minutes(b.end)) for b in breaks),
    )
    return [_make_segment(start, end) for start, end in gaps]


def subtract_busy_blocks(
    baseline: BaselineWindow, busy_blocks: Iterable[BusyBlock]
) -> list[TimeSegment]:
    """
    Available segments of an absolute baseline window after removing busy blocks.

    Endpoints are compared in UTC (naive values read as UTC) and rendered as
    "YYYY-MM-DDTHH:MM:SS.mmmZ", the same shape as computed_at.
    """
    gaps = subtract_intervals(
        to_utc(baseline.start),
        to_utc(baseline.end),
        ((to_utc(block.start), to_utc(block.end)) for block in busy_blocks),
    )
    return [
        TimeSegment(start=format_iso_timestamp(start), end=format_iso_timestamp(end))
        for start, end in gaps
    ]


def segment_minutes(segment: TimeSegment) -> int:
    """Length of an absolute segment in minutes."""
    return minutes_between(to_utc(segment.start), to_utc(segment.end))
