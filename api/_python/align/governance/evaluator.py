"""
Day evaluator ("governor").

Produces exactly one governance decision per mode for a day:
1. SILENCE every mode if the profile is missing or confidence is LOW
2. SILENCE a mode with no RELIABLE baseline window
3. Pick the earliest RELIABLE window for the mode
4. Subtract overlapping busy blocks; drop segments below the mode's minimum
5. No conflicts or one surviving segment => PERMIT, several => FRAGMENTED,
   none => SILENCE

The evaluator is a pure function of its inputs apart from computed_at. It
never raises for degraded conditions; the only failure a caller sees is a
SILENCE decision with a structural reason.
"""

import logging
from dataclasses import dataclass, field

from ..time_math import format_iso_timestamp, get_current_iso_timestamp, to_utc
from ..types import (
    ALL_MODES,
    BaselineWindow,
    BusyBlock,
    GovernorInput,
    Mode,
    ModeGovernanceDecision,
    TimeSegment,
)
from .intervals import segment_minutes, subtract_busy_blocks

logger = logging.getLogger(__name__)

# Structural reasons (neutral, no motivational language). Consumed verbatim.
REASONS = {
    "CONFIDENCE_INSUFFICIENT": "Confidence insufficient.",
    "NO_RELIABLE_WINDOW": "No reliable window available.",
    "WINDOW_RELIABLE_UNCONFLICTED": "Window is structurally reliable and unconflicted.",
    "WINDOW_SPLIT": "Window is split by an unavailable time.",
    "NO_USABLE_SEGMENT": "Unavailable time leaves no usable segment.",
}

# Minimum segment length the governor will recommend, per mode. Independent
# of the classifier's MIN_SEGMENT_MINUTES even where the values coincide.
DEFAULT_MIN_SEGMENT_MINUTES = 30

MODE_MIN_SEGMENT_MINUTES: dict[Mode, int] = {
    "FRAMING": DEFAULT_MIN_SEGMENT_MINUTES,
    "EVALUATION": DEFAULT_MIN_SEGMENT_MINUTES,
    "SYNTHESIS": DEFAULT_MIN_SEGMENT_MINUTES,
    "EXECUTION": 45,  # Needs sustained throughput
    "REFLECTION": 20,  # Low-stakes, opportunistic
}


@dataclass
class GovernorConfig:
    """Per-mode minimum segment durations used after subtraction."""

    min_segment_minutes: dict[Mode, int] = field(
        default_factory=lambda: dict(MODE_MIN_SEGMENT_MINUTES)
    )

    def get_min_segment_minutes(self, mode: Mode) -> int:
        """Minimum viable segment for a mode."""
        return self.min_segment_minutes.get(mode, DEFAULT_MIN_SEGMENT_MINUTES)


def windows_overlap(baseline: BaselineWindow, busy: BusyBlock) -> bool:
    """
    Check if a baseline window overlaps a busy block.

    Touching boundaries (end == start) do not count as overlap.
    """
    baseline_start = to_utc(baseline.start)
    baseline_end = to_utc(baseline.end)
    return baseline_start < to_utc(busy.end) and to_utc(busy.start) < baseline_end


def select_candidate_window(
    mode: Mode, baseline_windows: list[BaselineWindow]
) -> BaselineWindow | None:
    """Earliest RELIABLE window for a mode, or None."""
    reliable = [w for w in baseline_windows if w.mode == mode and w.reliability == "RELIABLE"]
    if not reliable:
        return None
    return min(reliable, key=lambda w: (to_utc(w.start), to_utc(w.end)))


class Governor:
    """
    Evaluate governance decisions for a day.

    Stateless apart from its configuration; safe to share across threads.
    """

    def __init__(self, config: GovernorConfig | None = None) -> None:
        self.config = config or GovernorConfig()

    def evaluate_day(self, governor_input: GovernorInput) -> list[ModeGovernanceDecision]:
        """
        Evaluate all five modes for a day.

        Args:
            governor_input: Profile, busy blocks, baseline windows and date

        Returns:
            One decision per mode, in ALL_MODES order
        """
        computed_at = get_current_iso_timestamp()
        profile = governor_input.profile

        if profile is None or profile.confidence == "LOW":
            logger.debug("Confidence gate: silencing all modes for %s", governor_input.day_iso_date)
            return [
                ModeGovernanceDecision(
                    mode=mode,
                    decision="SILENCE",
                    reason=REASONS["CONFIDENCE_INSUFFICIENT"],
                    computed_at=computed_at,
                )
                for mode in ALL_MODES
            ]

        return [
            self._evaluate_mode(
                mode, governor_input.baseline_windows, governor_input.busy_blocks, computed_at
            )
            for mode in ALL_MODES
        ]

    def _evaluate_mode(
        self,
        mode: Mode,
        baseline_windows: list[BaselineWindow],
        busy_blocks: list[BusyBlock],
        computed_at: str,
    ) -> ModeGovernanceDecision:
        """Evaluate a single mode independently of the others."""
        candidate = select_candidate_window(mode, baseline_windows)

        if candidate is None:
            return ModeGovernanceDecision(
                mode=mode,
                decision="SILENCE",
                reason=REASONS["NO_RELIABLE_WINDOW"],
                computed_at=computed_at,
            )

        conflicts = [block for block in busy_blocks if windows_overlap(candidate, block)]

        if not conflicts:
            return ModeGovernanceDecision(
                mode=mode,
                decision="PERMIT",
                reason=REASONS["WINDOW_RELIABLE_UNCONFLICTED"],
                computed_at=computed_at,
                window=TimeSegment(
                    start=format_iso_timestamp(to_utc(candidate.start)),
                    end=format_iso_timestamp(to_utc(candidate.end)),
                ),
            )

        min_minutes = self.config.get_min_segment_minutes(mode)
        segments = [
            seg
            for seg in subtract_busy_blocks(candidate, conflicts)
            if segment_minutes(seg) >= min_minutes
        ]
        logger.debug(
            "%s: %d conflicting block(s), %d segment(s) of %d+ min",
            mode,
            len(conflicts),
            len(segments),
            min_minutes,
        )

        if not segments:
            return ModeGovernanceDecision(
                mode=mode,
                decision="SILENCE",
                reason=REASONS["NO_USABLE_SEGMENT"],
                computed_at=computed_at,
            )

        if len(segments) == 1:
            return ModeGovernanceDecision(
                mode=mode,
                decision="PERMIT",
                reason=REASONS["WINDOW_RELIABLE_UNCONFLICTED"],
                computed_at=computed_at,
                window=segments[0],
            )

        return ModeGovernanceDecision(
            mode=mode,
            decision="FRAGMENTED",
            reason=REASONS["WINDOW_SPLIT"],
            computed_at=computed_at,
            segments=segments,
        )


def evaluate_day(
    governor_input: GovernorInput, config: GovernorConfig | None = None
) -> list[ModeGovernanceDecision]:
    """
    Convenience function to evaluate a day.

    Args:
        governor_input: Profile, busy blocks, baseline windows and date
        config: Optional per-mode thresholds

    Returns:
        Five ModeGovernanceDecision objects
    """
    return Governor(config).evaluate_day(governor_input)
