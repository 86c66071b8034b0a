"""
Test helper functions for governance tests.

Builders for profiles, windows and blocks on a fixed test day, plus small
lookups over decision lists.
"""

import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from align.types import (
    BaselineWindow,
    BusyBlock,
    ChronotypeProfile,
    GovernorInput,
    ModeGovernanceDecision,
    UnavailableBlock,
)

TEST_DATE = "2024-01-15"


def iso_at(hour: int, minute: int = 0, day: str = TEST_DATE) -> str:
    """Naive ISO timestamp on the test day, e.g. "2024-01-15T09:30:00"."""
    return f"{day}T{hour:02d}:{minute:02d}:00"


def create_profile(confidence: str = "HIGH") -> ChronotypeProfile:
    """MERIDIAN profile with the given confidence."""
    return ChronotypeProfile(
        chronotype="MERIDIAN",
        confidence=confidence,
        computed_at="2024-01-14T12:00:00.000Z",
    )


def create_baseline_window(
    mode: str,
    start_hour: int,
    end_hour: int,
    start_minute: int = 0,
    end_minute: int = 0,
    reliability: str = "RELIABLE",
) -> BaselineWindow:
    """Baseline window on the test day."""
    return BaselineWindow(
        mode=mode,
        start=iso_at(start_hour, start_minute),
        end=iso_at(end_hour, end_minute),
        reliability=reliability,
    )


def create_busy_block(
    start_hour: int, end_hour: int, start_minute: int = 0, end_minute: int = 0
) -> BusyBlock:
    """Busy block on the test day (naive datetimes, matching the baseline windows)."""
    day = datetime.fromisoformat(TEST_DATE)
    return BusyBlock(
        start=day.replace(hour=start_hour, minute=start_minute),
        end=day.replace(hour=end_hour, minute=end_minute),
    )


def create_block(
    block_id: str, start: str, end: str, break_type: str | None = None, label: str | None = None
) -> UnavailableBlock:
    """Wall-clock unavailable block."""
    return UnavailableBlock(id=block_id, start=start, end=end, label=label, break_type=break_type)


def make_input(
    busy_blocks: list[BusyBlock] | None = None,
    baseline_windows: list[BaselineWindow] | None = None,
    profile: ChronotypeProfile | None = None,
    confidence: str | None = "HIGH",
) -> GovernorInput:
    """Governor input for the test day; confidence=None means no profile."""
    if profile is None and confidence is not None:
        profile = create_profile(confidence)
    return GovernorInput(
        profile=profile,
        busy_blocks=busy_blocks or [],
        baseline_windows=baseline_windows or [],
        day_iso_date=TEST_DATE,
    )


def get_decision(decisions: list[ModeGovernanceDecision], mode: str) -> ModeGovernanceDecision:
    """Decision for a mode (fails the test if absent)."""
    for decision in decisions:
        if decision.mode == mode:
            return decision
    raise AssertionError(f"No decision for mode {mode}")


def utc_at(hour: int, minute: int = 0, day: str = TEST_DATE) -> str:
    """Timestamp in the governor's output shape, e.g. "2024-01-15T09:30:00.000Z"."""
    return f"{day}T{hour:02d}:{minute:02d}:00.000Z"
