"""
Align Reliability Governor

Determines, for a day and five cognitive modes, whether conditions are
structurally reliable enough to recommend each mode, reliable only in
segments, or not reliable at all.

Main entry point: Governor / evaluate_day
"""

from .export import decisions_to_dict, generate_ics
from .governance import (
    Governor,
    GovernorConfig,
    assess_mode_window,
    compute_mode_windows,
    evaluate_day,
)
from .types import (
    ALL_MODES,
    BaselineWindow,
    BreakAssessment,
    BusyBlock,
    ChronotypeProfile,
    ClassifiedBreak,
    GovernorInput,
    Mode,
    ModeGovernanceDecision,
    TimeSegment,
    TimeWindow,
    UnavailableBlock,
)
from .unavailable import extract_unavailable_times, unavailable_to_busy_blocks

__all__ = [
    # Types
    "ALL_MODES",
    "Mode",
    "ChronotypeProfile",
    "BaselineWindow",
    "BusyBlock",
    "UnavailableBlock",
    "TimeWindow",
    "TimeSegment",
    "ClassifiedBreak",
    "BreakAssessment",
    "GovernorInput",
    "ModeGovernanceDecision",
    # Governor
    "Governor",
    "GovernorConfig",
    "evaluate_day",
    "assess_mode_window",
    "compute_mode_windows",
    # Conversion and export
    "extract_unavailable_times",
    "unavailable_to_busy_blocks",
    "generate_ics",
    "decisions_to_dict",
]
