"""
Mode-specific window status.

Maps the classifier's fragmenting-break count and resulting availability to
one of four statuses. Sensitivity differs per mode:
- EVALUATION: binary; any fragmenting break withholds the window
- FRAMING: any fragmenting break disrupts the window
- SYNTHESIS: any fragmenting break fragments the window
- EXECUTION: fragmented only when less than 60% remains available
- REFLECTION: fragmented only when less than 50% remains available
"""

from ..types import BreakAssessment, Mode, WindowStatus

EXECUTION_MIN_AVAILABILITY = 0.6
REFLECTION_MIN_AVAILABILITY = 0.5


def determine_window_status(
    mode: Mode, fragmenting_count: int, availability_percent: float
) -> WindowStatus:
    """
    Determine the overall window status.

    Args:
        mode: Cognitive mode
        fragmenting_count: Number of fragmenting breaks in the window
        availability_percent: Available share of the window (0-1)

    Returns:
        "clear", "fragmented", "disrupted" or "withheld"
    """
    if fragmenting_count == 0:
        return "clear"

    if mode == "EVALUATION":
        return "withheld"
    if mode == "FRAMING":
        return "disrupted"
    if mode == "SYNTHESIS":
        return "fragmented"
    if mode == "EXECUTION":
        return "fragmented" if availability_percent < EXECUTION_MIN_AVAILABILITY else "clear"
    if mode == "REFLECTION":
        return "fragmented" if availability_percent < REFLECTION_MIN_AVAILABILITY else "clear"
    return "fragmented"


def _interruptions(count: int) -> str:
    return f"{count} interruption{'s' if count != 1 else ''}"


def get_break_assessment_summary(assessment: BreakAssessment) -> str:
    """Short human-readable summary of an assessment."""
    status = assessment.overall_status
    count = assessment.fragmenting_break_count

    if status == "clear":
        return "No interruptions"
    if status == "fragmented":
        return f"{_interruptions(count)} fragment this window"
    if status == "disrupted":
        return f"{_interruptions(count)} disrupt this window"
    if status == "withheld":
        return "Window too fragmented for reliable judgment"
    return ""
