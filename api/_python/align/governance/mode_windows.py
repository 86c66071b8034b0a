"""
Mode window computation.

Converts governor decisions into mode-specific states with failure
signatures. The break classifier decides whether unavailable time inside a
permitted window actually degrades it; restorative breaks leave the state
intact.

State mapping per mode:
- EVALUATION: PERMIT -> INTACT, anything else -> WITHHELD (binary only)
- FRAMING: PERMIT -> INTACT, FRAGMENTED -> DEFERRED, SILENCE -> WITHHELD
- SYNTHESIS: PERMIT -> INTACT, FRAGMENTED -> FRAGMENTED (SEVERE -> WITHHELD)
- EXECUTION: PERMIT -> INTACT, FRAGMENTED -> STRAINED (SEVERE -> WITHHELD)
- REFLECTION: PERMIT -> AVAILABLE, anything else -> SILENCE (not shown)
"""

import logging
from collections.abc import Iterable

from ..time_math import (
    duration_minutes,
    minutes_to_time,
    time_to_minutes,
    to_local_hhmm,
    windows_overlap,
)
from ..types import (
    FragmentationAnalysis,
    FragmentationSeverity,
    GovernanceVerdict,
    Mode,
    ModeGovernanceDecision,
    ModeStateValue,
    ModeWindow,
    TimeWindow,
    UnavailableBlock,
)
from .break_classifier import assess_mode_window
from .failure_signatures import DISCOVERY_PRIORITY, get_failure_signature
from .intervals import subtract_intervals

logger = logging.getLogger(__name__)


def is_valid_state_for_mode(mode: Mode, state: ModeStateValue) -> bool:
    """Check if a state belongs to a mode's state set."""
    if mode == "EVALUATION":
        return state in ("INTACT", "WITHHELD")
    if mode == "FRAMING":
        return state in ("INTACT", "DEFERRED", "WITHHELD")
    if mode == "SYNTHESIS":
        return state in ("INTACT", "FRAGMENTED", "WITHHELD")
    if mode == "EXECUTION":
        return state in ("INTACT", "STRAINED", "WITHHELD")
    if mode == "REFLECTION":
        return state in ("AVAILABLE", "SILENCE")
    return False


def _severity_for(
    baseline_minutes: int, percentage_available: float, conflict_count: int
) -> FragmentationSeverity:
    """
    Proportional severity: short windows get stricter thresholds.

    - Short (<= 60 min), e.g. a 30 min Aurora synthesis window
    - Medium (<= 120 min), most framing/evaluation windows
    - Long (> 120 min), execution windows of 3-4 hours
    """
    if baseline_minutes <= 60:
        if percentage_available < 0.5 or conflict_count >= 2:
            return "SEVERE"
        if percentage_available < 0.75:
            return "MODERATE"
        return "LIGHT"

    if baseline_minutes <= 120:
        if percentage_available < 0.3 or conflict_count >= 3:
            return "SEVERE"
        if percentage_available < 0.6 or conflict_count >= 2:
            return "MODERATE"
        return "LIGHT"

    if percentage_available < 0.25 or conflict_count >= 4:
        return "SEVERE"
    if percentage_available < 0.5 or conflict_count >= 3:
        return "MODERATE"
    return "LIGHT"


def analyze_fragmentation(
    baseline_window: TimeWindow, unavailable_times: Iterable[UnavailableBlock]
) -> FragmentationAnalysis:
    """
    Analyze how unavailable times cut up a baseline window.

    Every conflict counts here regardless of break type; classification is
    applied separately by the break classifier.
    """
    conflicts = [
        ut
        for ut in unavailable_times
        if windows_overlap(baseline_window, TimeWindow(start=ut.start, end=ut.end))
    ]
    baseline_minutes = duration_minutes(baseline_window.start, baseline_window.end)

    if not conflicts:
        return FragmentationAnalysis(
            has_fragmentation=False,
            fragmentation_severity="LIGHT",
            available_portions=[baseline_window],
            total_available_minutes=baseline_minutes,
            percentage_available=1.0,
            conflicts=[],
            baseline_window=baseline_window,
        )

    gaps = subtract_intervals(
        time_to_minutes(baseline_window.start),
        time_to_minutes(baseline_window.end),
        ((time_to_minutes(c.start), time_to_minutes(c.end)) for c in conflicts),
    )
    portions = [TimeWindow(start=minutes_to_time(s), end=minutes_to_time(e)) for s, e in gaps]
    total_available = sum(e - s for s, e in gaps)
    percentage = total_available / baseline_minutes if baseline_minutes > 0 else 0.0

    return FragmentationAnalysis(
        has_fragmentation=True,
        fragmentation_severity=_severity_for(baseline_minutes, percentage, len(conflicts)),
        available_portions=portions,
        total_available_minutes=total_available,
        percentage_available=percentage,
        conflicts=conflicts,
        baseline_window=baseline_window,
    )


def map_verdict_to_state(
    mode: Mode, verdict: GovernanceVerdict, severity: FragmentationSeverity = "LIGHT"
) -> ModeStateValue:
    """Map a governor verdict and severity to the mode's own state."""
    if mode == "EVALUATION":
        return "INTACT" if verdict == "PERMIT" else "WITHHELD"

    if mode == "FRAMING":
        if verdict == "PERMIT":
            return "INTACT"
        if verdict == "FRAGMENTED":
            return "DEFERRED"
        return "WITHHELD"

    if mode == "SYNTHESIS":
        if verdict == "PERMIT":
            return "INTACT"
        if verdict == "FRAGMENTED":
            return "WITHHELD" if severity == "SEVERE" else "FRAGMENTED"
        return "WITHHELD"

    if mode == "EXECUTION":
        if verdict == "PERMIT":
            return "INTACT"
        if verdict == "FRAGMENTED":
            return "WITHHELD" if severity == "SEVERE" else "STRAINED"
        return "WITHHELD"

    if mode == "REFLECTION":
        return "AVAILABLE" if verdict == "PERMIT" else "SILENCE"

    return "WITHHELD"


def _baseline_span(decision: ModeGovernanceDecision, tz_name: str | None) -> TimeWindow | None:
    """Full HH:MM span covered by a decision, or None for SILENCE."""
    if decision.window is not None:
        return TimeWindow(
            start=to_local_hhmm(decision.window.start, tz_name),
            end=to_local_hhmm(decision.window.end, tz_name),
        )
    if decision.decision == "FRAGMENTED" and decision.segments:
        return TimeWindow(
            start=to_local_hhmm(decision.segments[0].start, tz_name),
            end=to_local_hhmm(decision.segments[-1].end, tz_name),
        )
    return None


def compute_mode_windows(
    decisions: Iterable[ModeGovernanceDecision],
    unavailable_times: Iterable[UnavailableBlock] = (),
    tz_name: str | None = None,
) -> list[ModeWindow]:
    """
    Compute mode-specific states from governor decisions.

    Args:
        decisions: Governor decisions for the day
        unavailable_times: Unavailable blocks for the day (wall clock)
        tz_name: IANA timezone used to read decision timestamps as wall clock

    Returns:
        ModeWindow per mode (REFLECTION is omitted when silenced)
    """
    unavailable_times = list(unavailable_times)
    mode_windows: list[ModeWindow] = []

    for decision in decisions:
        mode = decision.mode
        span = _baseline_span(decision, tz_name)

        if span is None:
            baseline_window = TimeWindow(start="", end="")
            fragmentation = FragmentationAnalysis(
                has_fragmentation=False,
                fragmentation_severity="LIGHT",
                available_portions=[],
                total_available_minutes=0,
                percentage_available=0.0,
                conflicts=[],
                baseline_window=baseline_window,
            )
        else:
            baseline_window = span
            fragmentation = analyze_fragmentation(span, unavailable_times)

        effective_verdict = decision.decision
        severity: FragmentationSeverity = "LIGHT"

        if span is not None and unavailable_times:
            assessment = assess_mode_window(mode, span, unavailable_times)

            # "clear" means every break is restorative; no downgrade
            if assessment.overall_status != "clear" and decision.decision == "PERMIT":
                effective_verdict = "FRAGMENTED"
                if assessment.overall_status == "withheld":
                    severity = "SEVERE"
                elif assessment.availability_percent < 0.5:
                    severity = "SEVERE"
                elif assessment.availability_percent < 0.75:
                    severity = "MODERATE"

        state = map_verdict_to_state(mode, effective_verdict, severity)

        # Reflection shows nothing when silenced
        if mode == "REFLECTION" and state == "SILENCE":
            continue

        signature = get_failure_signature(mode, state)
        if signature is None:
            continue

        logger.debug("%s: %s -> %s", mode, decision.decision, state)
        mode_windows.append(
            ModeWindow(
                mode=mode,
                state=state,
                window=baseline_window,
                failure_signature=signature,
                fragmentation=fragmentation,
            )
        )

    return mode_windows


def sort_by_discovery_risk(mode_windows: Iterable[ModeWindow]) -> list[ModeWindow]:
    """Most time-sensitive warnings first (TOO_LATE, TOMORROW, IMMEDIATE)."""
    return sorted(
        mode_windows,
        key=lambda mw: DISCOVERY_PRIORITY.get(mw.failure_signature.discovery_window, 0),
        reverse=True,
    )


def is_warning_state(state: ModeStateValue) -> bool:
    """True for any state other than INTACT/AVAILABLE."""
    return state not in ("INTACT", "AVAILABLE")


def count_flagged_modes(mode_windows: Iterable[ModeWindow]) -> int:
    """Number of modes in a warning state."""
    return sum(1 for mw in mode_windows if is_warning_state(mw.state))
