"""
Reliability Governance Layer.

Decides, per cognitive mode, whether a day's conditions are reliable enough
to recommend it.

Modules:
- intervals: Window subtraction (clip, merge, gaps)
- break_classifier: Restorative vs fragmenting breaks, cumulative ramp-up
- window_status: Mode-specific sensitivity to fragmenting breaks
- evaluator: Per-mode PERMIT / FRAGMENTED / SILENCE decisions for a day
- mode_windows: Mode-specific states and failure signatures
"""

from .break_classifier import assess_mode_window, classify_break
from .evaluator import Governor, GovernorConfig, evaluate_day
from .intervals import calculate_segments, subtract_busy_blocks, subtract_intervals
from .mode_windows import compute_mode_windows, is_valid_state_for_mode
from .window_status import determine_window_status, get_break_assessment_summary

__all__ = [
    "Governor",
    "GovernorConfig",
    "evaluate_day",
    "assess_mode_window",
    "classify_break",
    "determine_window_status",
    "get_break_assessment_summary",
    "calculate_segments",
    "subtract_busy_blocks",
    "subtract_intervals",
    "compute_mode_windows",
    "is_valid_state_for_mode",
]
