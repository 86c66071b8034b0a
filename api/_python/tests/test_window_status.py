"""
Tests for mode-specific window status and assessment summaries.
"""

import pytest

from align.governance.window_status import determine_window_status, get_break_assessment_summary
from align.types import BreakAssessment


def make_assessment(status, fragmenting_count):
    return BreakAssessment(
        breaks=[],
        segments=[],
        overall_status=status,
        total_available_minutes=0,
        availability_percent=0.0,
        fragmenting_break_count=fragmenting_count,
        restorative_break_count=0,
    )


class TestDetermineWindowStatus:
    @pytest.mark.parametrize(
        "mode", ["FRAMING", "EVALUATION", "SYNTHESIS", "EXECUTION", "REFLECTION"]
    )
    def test_no_fragmenting_breaks_is_clear(self, mode):
        assert determine_window_status(mode, 0, 0.1) == "clear"

    def test_evaluation_is_binary(self):
        assert determine_window_status("EVALUATION", 1, 0.95) == "withheld"

    def test_framing_is_disrupted(self):
        assert determine_window_status("FRAMING", 1, 0.95) == "disrupted"

    def test_synthesis_is_fragmented(self):
        assert determine_window_status("SYNTHESIS", 1, 0.95) == "fragmented"

    def test_execution_tolerates_down_to_sixty_percent(self):
        assert determine_window_status("EXECUTION", 2, 0.6) == "clear"
        assert determine_window_status("EXECUTION", 2, 0.59) == "fragmented"

    def test_reflection_tolerates_down_to_half(self):
        assert determine_window_status("REFLECTION", 2, 0.5) == "clear"
        assert determine_window_status("REFLECTION", 2, 0.49) == "fragmented"


class TestSummary:
    def test_clear(self):
        assert get_break_assessment_summary(make_assessment("clear", 0)) == "No interruptions"

    def test_fragmented_singular(self):
        summary = get_break_assessment_summary(make_assessment("fragmented", 1))
        assert summary == "1 interruption fragment this window"

    def test_disrupted_plural(self):
        summary = get_break_assessment_summary(make_assessment("disrupted", 3))
        assert summary == "3 interruptions disrupt this window"

    def test_withheld(self):
        summary = get_break_assessment_summary(make_assessment("withheld", 1))
        assert summary == "Window too fragmented for reliable judgment"
