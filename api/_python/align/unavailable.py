"""
Conversion between unavailable-time records and engine intervals.

- Constraint records for a day -> wall-clock UnavailableBlocks (classifier input)
- Wall-clock blocks -> absolute BusyBlocks on a calendar day (governor input)

Records are assumed to have been validated before they reach this module.
"""

from collections.abc import Iterable

from .time_math import MINUTES_PER_DAY, localize_day_time, minutes_to_time, time_to_minutes
from .types import BusyBlock, FixedBlockConstraint, UnavailableBlock

ALL_DAY_START = "00:00"
ALL_DAY_END = "24:00"


def extract_unavailable_times(
    constraints: Iterable[FixedBlockConstraint], day_iso: str
) -> list[UnavailableBlock]:
    """
    Unavailable blocks that apply to a day.

    All-day records cover 00:00-24:00. Records missing a start or end are skipped.
    """
    blocks = []
    for constraint in constraints:
        if constraint.date_iso != day_iso:
            continue

        if constraint.all_day:
            start, end = ALL_DAY_START, ALL_DAY_END
        else:
            start, end = constraint.start_local, constraint.end_local

        if not start or not end:
            continue

        blocks.append(
            UnavailableBlock(
                id=constraint.id,
                start=start,
                end=end,
                label=constraint.label,
                break_type=constraint.break_type,
            )
        )
    return blocks


def unavailable_to_busy_blocks(
    blocks: Iterable[UnavailableBlock], day_iso: str, tz_name: str | None = None
) -> list[BusyBlock]:
    """
    Place wall-clock blocks on the absolute timeline of a day.

    A block whose end is not after its start crosses midnight and ends the
    next day.
    """
    busy_blocks = []
    for block in blocks:
        start_minutes = time_to_minutes(block.start)
        end_minutes = time_to_minutes(block.end)
        if end_minutes <= start_minutes:
            end_minutes += MINUTES_PER_DAY

        busy_blocks.append(
            BusyBlock(
                start=localize_day_time(day_iso, block.start, tz_name),
                end=localize_day_time(day_iso, minutes_to_time(end_minutes), tz_name),
                all_day=(block.start, block.end) == (ALL_DAY_START, ALL_DAY_END),
                source="manual",
                id=block.id,
            )
        )
    return busy_blocks
