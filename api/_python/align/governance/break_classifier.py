"""
Break classification engine.

Distinguishes restorative breaks from reliability-degrading interruptions
using structural properties only: duration, position in the window,
cumulative cost and the user-declared break type.

Per-break rules, first match wins:
- Rule 0: Commitments always fragment (strong: Monsell 2003, Rogers & Monsell 1995)
- Rule 1: Rest breaks > 30 min fragment (moderate: context decay)
- Rule 2: Adjacent segment < 30 min fragments (moderate-high: WM loading ~15-25 min)
- Rule 3: Unclassified blocks > 20 min fragment (low: heuristic nudge to classify)

Window-level rule:
- Rule 4: Cumulative ramp-up > 30% of window fragments every restorative
  break (moderate: Mark et al. 2005)
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from ..time_math import (
    MINUTES_PER_DAY,
    duration_minutes,
    intersect,
    minutes_to_time,
    normalize_window,
    time_to_minutes,
    windows_overlap,
)
from ..types import BreakAssessment, ClassifiedBreak, Mode, TimeWindow, UnavailableBlock
from .intervals import MIN_SEGMENT_MINUTES, calculate_segments
from .window_status import determine_window_status

logger = logging.getLogger(__name__)

# Rest breaks longer than this lose task context regardless of activity
MAX_REST_DURATION_MINUTES = 30

# Low evidence, product-policy choice: without a declared type the system
# can't tell a dog walk from a call
MAX_UNCLASSIFIED_DURATION = 20

# Estimated cost of rebuilding context after each switch
RAMPUP_COST_MINUTES = 20

# Share of the window that may be spent re-ramping before it stops being usable
MAX_RAMPUP_RATIO = 0.30

REASON_COMMITMENT = "Commitment requires cognitive engagement; imposes switch cost"
REASON_REST_TOO_LONG = (
    f"Break exceeds {MAX_REST_DURATION_MINUTES} minutes; context degrades regardless of activity"
)
REASON_SHORT_SEGMENT = "Creates a segment of {minutes} minutes; insufficient for sustained depth"
REASON_UNCLASSIFIED_TOO_LONG = (
    f"Block exceeds {MAX_UNCLASSIFIED_DURATION} minutes; classify to get better assessment"
)
REASON_RESTORATIVE = "{label} with viable segments on both sides; restorative"
REASON_CUMULATIVE_RAMPUP = (
    f"Cumulative ramp-up cost exceeds {round(MAX_RAMPUP_RATIO * 100)}% of window; "
    "too many context switches"
)
REASON_NO_OVERLAP = "Break does not overlap with mode window"


def align_block_to_window(block: UnavailableBlock, window: TimeWindow) -> UnavailableBlock:
    """
    Place a block on the same timeline as a (normalized) window.

    Blocks that cross midnight get an end past "24:00". Blocks entirely
    after midnight are shifted by a day when the window crosses midnight
    and the shifted block lands inside it.
    """
    start = time_to_minutes(block.start)
    end = time_to_minutes(block.end)
    if end <= start:
        end += MINUTES_PER_DAY

    window_start = time_to_minutes(window.start)
    window_end = time_to_minutes(window.end)
    if end <= window_start and start + MINUTES_PER_DAY < window_end:
        start += MINUTES_PER_DAY
        end += MINUTES_PER_DAY

    if (start, end) == (time_to_minutes(block.start), time_to_minutes(block.end)):
        return block
    return replace(block, start=minutes_to_time(start), end=minutes_to_time(end))


def get_shortest_adjacent_segment(
    break_window: TimeWindow, window: TimeWindow, all_breaks: Iterable[TimeWindow]
) -> int:
    """
    Length of the shortest available segment touching a break.

    Segments are computed over every break in the window. When no segment
    touches the break (e.g. it is merged into a neighbour), fall back to the
    distance between the break and the window edges.
    """
    segments = calculate_segments(window, all_breaks)
    break_start = time_to_minutes(break_window.start)
    break_end = time_to_minutes(break_window.end)

    adjacent = [
        seg.duration_minutes
        for seg in segments
        if time_to_minutes(seg.end) == break_start or time_to_minutes(seg.start) == break_end
    ]
    if adjacent:
        return min(adjacent)

    edge_gaps = []
    before = break_start - time_to_minutes(window.start)
    if before > 0:
        edge_gaps.append(before)
    after = time_to_minutes(window.end) - break_end
    if after > 0:
        edge_gaps.append(after)

    return min(edge_gaps) if edge_gaps else 0


def classify_break(
    block: UnavailableBlock, window: TimeWindow, all_breaks_in_window: list[TimeWindow]
) -> ClassifiedBreak:
    """
    Classify a single block within a mode window.

    Args:
        block: Unavailable block (already aligned to the window's timeline)
        window: Normalized mode window
        all_breaks_in_window: Clipped intervals of every block in the window

    Returns:
        ClassifiedBreak clipped to the window
    """
    break_type = block.effective_break_type
    clipped = intersect(TimeWindow(start=block.start, end=block.end), window)

    if clipped is None:
        return ClassifiedBreak(
            id=block.id,
            start=block.start,
            end=block.end,
            break_type=break_type,
            duration_minutes=duration_minutes(block.start, block.end),
            classification="fragmenting",
            reason=REASON_NO_OVERLAP,
            label=block.label,
        )

    duration = duration_minutes(clipped.start, clipped.end)

    def verdict(classification, reason):
        return ClassifiedBreak(
            id=block.id,
            start=clipped.start,
            end=clipped.end,
            break_type=break_type,
            duration_minutes=duration,
            classification=classification,
            reason=reason,
            label=block.label,
        )

    # Rule 0
    if break_type == "commitment":
        return verdict("fragmenting", REASON_COMMITMENT)

    # Rule 1
    if break_type == "rest" and duration > MAX_REST_DURATION_MINUTES:
        return verdict("fragmenting", REASON_REST_TOO_LONG)

    # Rule 2
    shortest_adjacent = get_shortest_adjacent_segment(clipped, window, all_breaks_in_window)
    if shortest_adjacent < MIN_SEGMENT_MINUTES:
        return verdict("fragmenting", REASON_SHORT_SEGMENT.format(minutes=shortest_adjacent))

    # Rule 3
    if break_type == "unclassified" and duration > MAX_UNCLASSIFIED_DURATION:
        return verdict("fragmenting", REASON_UNCLASSIFIED_TOO_LONG)

    # Preliminarily restorative; Rule 4 is applied across the whole window
    label = "Rest break" if break_type == "rest" else "Short break"
    return verdict("restorative", REASON_RESTORATIVE.format(label=label))


def check_cumulative_ramp_up(
    non_commitment_break_count: int, window_duration_minutes: int
) -> tuple[bool, float]:
    """
    Check whether re-ramping after breaks eats too much of the window.

    Returns:
        Tuple of (exceeded, ratio of estimated ramp-up time to window duration)
    """
    estimated_ramp_up = non_commitment_break_count * RAMPUP_COST_MINUTES
    ratio = estimated_ramp_up / window_duration_minutes if window_duration_minutes > 0 else 0.0
    return (ratio > MAX_RAMPUP_RATIO, ratio)


def apply_cumulative_ramp_up(
    breaks: list[ClassifiedBreak], window_duration_minutes: int
) -> list[ClassifiedBreak]:
    """
    Rule 4: reclassify every restorative break when ramp-up cost is too high.

    Returns a new list; the input list and its items are left untouched.
    Commitments are already fragmenting and are never reclassified.
    """
    non_commitment_count = sum(1 for b in breaks if b.break_type != "commitment")
    exceeded, ratio = check_cumulative_ramp_up(non_commitment_count, window_duration_minutes)

    if not exceeded or not any(b.classification == "restorative" for b in breaks):
        return list(breaks)

    logger.debug(
        "Ramp-up ratio %.2f exceeds %.2f; reclassifying restorative breaks", ratio, MAX_RAMPUP_RATIO
    )
    return [
        replace(b, classification="fragmenting", reason=REASON_CUMULATIVE_RAMPUP)
        if b.classification == "restorative"
        else b
        for b in breaks
    ]


def assess_mode_window(
    mode: Mode, window: TimeWindow, unavailable_blocks: Iterable[UnavailableBlock]
) -> BreakAssessment:
    """
    Classify every block in a mode window and determine the window status.

    Restorative breaks do not create gaps in the reported segments; only
    fragmenting breaks split the window.

    Args:
        mode: Cognitive mode (controls sensitivity)
        window: Mode window, may cross midnight
        unavailable_blocks: All unavailable blocks for the day

    Returns:
        BreakAssessment for the window
    """
    window = normalize_window(window)
    window_duration = duration_minutes(window.start, window.end)

    overlapping = []
    for block in unavailable_blocks:
        aligned = align_block_to_window(block, window)
        if windows_overlap(window, TimeWindow(start=aligned.start, end=aligned.end)):
            overlapping.append(aligned)

    if not overlapping:
        return BreakAssessment(
            breaks=[],
            segments=calculate_segments(window, []),
            overall_status="clear",
            total_available_minutes=window_duration,
            availability_percent=1.0,
            fragmenting_break_count=0,
            restorative_break_count=0,
        )

    clipped_breaks = [
        clipped
        for clipped in (
            intersect(TimeWindow(start=b.start, end=b.end), window) for b in overlapping
        )
        if clipped is not None
    ]

    classified = [classify_break(block, window, clipped_breaks) for block in overlapping]
    classified = apply_cumulative_ramp_up(classified, window_duration)

    fragmenting = [b for b in classified if b.classification == "fragmenting"]
    restorative_count = len(classified) - len(fragmenting)

    segments = calculate_segments(
        window, [TimeWindow(start=b.start, end=b.end) for b in fragmenting]
    )
    total_available = sum(seg.duration_minutes for seg in segments)
    availability = total_available / window_duration if window_duration > 0 else 0.0

    overall_status = determine_window_status(mode, len(fragmenting), availability)
    logger.debug(
        "%s %s-%s: %d fragmenting, %d restorative, %.0f%% available -> %s",
        mode,
        window.start,
        window.end,
        len(fragmenting),
        restorative_count,
        availability * 100,
        overall_status,
    )

    return BreakAssessment(
        breaks=classified,
        segments=segments,
        overall_status=overall_status,
        total_available_minutes=total_available,
        availability_percent=availability,
        fragmenting_break_count=len(fragmenting),
        restorative_break_count=restorative_count,
    )
