"""
Tests for mode windows: verdict-to-state mapping, fragmentation severity and
the break classifier's effect on permitted windows.
"""

from helpers import (
    TEST_DATE,
    create_baseline_window,
    create_block,
    iso_at,
    make_input,
)

from align.governance.evaluator import Governor
from align.governance.failure_signatures import get_failure_signature
from align.governance.mode_windows import (
    analyze_fragmentation,
    compute_mode_windows,
    count_flagged_modes,
    is_valid_state_for_mode,
    map_verdict_to_state,
    sort_by_discovery_risk,
)
from align.types import ModeGovernanceDecision, TimeSegment, TimeWindow
from align.unavailable import unavailable_to_busy_blocks


def permit(mode, start_hour, end_hour):
    return ModeGovernanceDecision(
        mode=mode,
        decision="PERMIT",
        reason="Window is structurally reliable and unconflicted.",
        computed_at="2024-01-15T07:00:00.000Z",
        window=TimeSegment(start=iso_at(start_hour), end=iso_at(end_hour)),
    )


def silence(mode):
    return ModeGovernanceDecision(
        mode=mode,
        decision="SILENCE",
        reason="No reliable window available.",
        computed_at="2024-01-15T07:00:00.000Z",
    )


def by_mode(mode_windows):
    return {mw.mode: mw for mw in mode_windows}


class TestStateMapping:
    def test_evaluation_is_binary(self):
        assert map_verdict_to_state("EVALUATION", "PERMIT") == "INTACT"
        assert map_verdict_to_state("EVALUATION", "FRAGMENTED") == "WITHHELD"
        assert map_verdict_to_state("EVALUATION", "SILENCE") == "WITHHELD"

    def test_framing_defers(self):
        assert map_verdict_to_state("FRAMING", "FRAGMENTED") == "DEFERRED"
        assert map_verdict_to_state("FRAMING", "SILENCE") == "WITHHELD"

    def test_synthesis_severity(self):
        assert map_verdict_to_state("SYNTHESIS", "FRAGMENTED", "MODERATE") == "FRAGMENTED"
        assert map_verdict_to_state("SYNTHESIS", "FRAGMENTED", "SEVERE") == "WITHHELD"

    def test_execution_strained(self):
        assert map_verdict_to_state("EXECUTION", "FRAGMENTED", "LIGHT") == "STRAINED"
        assert map_verdict_to_state("EXECUTION", "FRAGMENTED", "SEVERE") == "WITHHELD"

    def test_reflection(self):
        assert map_verdict_to_state("REFLECTION", "PERMIT") == "AVAILABLE"
        assert map_verdict_to_state("REFLECTION", "FRAGMENTED") == "SILENCE"

    def test_mapped_states_are_valid(self):
        for mode in ("FRAMING", "EVALUATION", "SYNTHESIS", "EXECUTION", "REFLECTION"):
            for verdict in ("PERMIT", "FRAGMENTED", "SILENCE"):
                for severity in ("LIGHT", "MODERATE", "SEVERE"):
                    state = map_verdict_to_state(mode, verdict, severity)
                    assert is_valid_state_for_mode(mode, state)
                    assert get_failure_signature(mode, state) is not None

    def test_invalid_state(self):
        assert not is_valid_state_for_mode("EVALUATION", "FRAGMENTED")
        assert not is_valid_state_for_mode("REFLECTION", "INTACT")


class TestAnalyzeFragmentation:
    def test_no_conflicts(self):
        analysis = analyze_fragmentation(TimeWindow("09:00", "11:00"), [])
        assert not analysis.has_fragmentation
        assert analysis.percentage_available == 1.0
        assert analysis.available_portions == [TimeWindow("09:00", "11:00")]

    def test_short_window_moderate(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "10:00"), [create_block("u1", "09:20", "09:50")]
        )
        assert analysis.total_available_minutes == 30
        assert analysis.fragmentation_severity == "MODERATE"

    def test_short_window_two_conflicts_severe(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "10:00"),
            [create_block("u1", "09:10", "09:12"), create_block("u2", "09:40", "09:42")],
        )
        assert analysis.fragmentation_severity == "SEVERE"

    def test_medium_window_two_conflicts_moderate(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "11:00"),
            [create_block("u1", "09:30", "09:40"), create_block("u2", "10:00", "10:10")],
        )
        assert analysis.fragmentation_severity == "MODERATE"
        assert analysis.available_portions == [
            TimeWindow("09:00", "09:30"),
            TimeWindow("09:40", "10:00"),
            TimeWindow("10:10", "11:00"),
        ]

    def test_long_window_light(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "13:00"), [create_block("u1", "10:00", "10:30")]
        )
        assert analysis.fragmentation_severity == "LIGHT"

    def test_long_window_mostly_covered_severe(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "13:00"), [create_block("u1", "09:00", "12:10")]
        )
        assert analysis.fragmentation_severity == "SEVERE"

    def test_touching_block_is_not_a_conflict(self):
        analysis = analyze_fragmentation(
            TimeWindow("09:00", "11:00"), [create_block("u1", "11:00", "12:00")]
        )
        assert not analysis.has_fragmentation


class TestComputeModeWindows:
    def test_permitted_windows_without_unavailable_time(self):
        windows = by_mode(compute_mode_windows([permit("FRAMING", 9, 11)]))
        framing = windows["FRAMING"]
        assert framing.state == "INTACT"
        assert framing.window == TimeWindow("09:00", "11:00")
        assert framing.failure_signature.consequence == "Good time to define the problem"

    def test_restorative_break_keeps_window_intact(self):
        windows = by_mode(
            compute_mode_windows(
                [permit("SYNTHESIS", 9, 12)], [create_block("r1", "10:00", "10:15", "rest")]
            )
        )
        synthesis = windows["SYNTHESIS"]
        assert synthesis.state == "INTACT"
        assert synthesis.fragmentation.has_fragmentation

    def test_commitment_withholds_evaluation(self):
        windows = by_mode(
            compute_mode_windows(
                [permit("EVALUATION", 9, 12)],
                [create_block("c1", "10:00", "10:05", "commitment")],
            )
        )
        evaluation = windows["EVALUATION"]
        assert evaluation.state == "WITHHELD"
        assert evaluation.failure_signature.discovery_window == "TOO_LATE"

    def test_commitment_fragments_synthesis(self):
        windows = by_mode(
            compute_mode_windows(
                [permit("SYNTHESIS", 9, 12)],
                [create_block("c1", "10:00", "11:00", "commitment")],
            )
        )
        assert windows["SYNTHESIS"].state == "FRAGMENTED"

    def test_execution_tolerates_moderate_loss(self):
        windows = by_mode(
            compute_mode_windows(
                [permit("EXECUTION", 9, 12)],
                [create_block("c1", "10:00", "11:00", "commitment")],
            )
        )
        assert windows["EXECUTION"].state == "INTACT"

    def test_execution_withheld_when_mostly_covered(self):
        windows = by_mode(
            compute_mode_windows(
                [permit("EXECUTION", 9, 12)],
                [create_block("c1", "09:30", "11:30", "commitment")],
            )
        )
        assert windows["EXECUTION"].state == "WITHHELD"

    def test_silenced_reflection_is_omitted(self):
        windows = by_mode(compute_mode_windows([silence("REFLECTION"), silence("FRAMING")]))
        assert "REFLECTION" not in windows
        assert windows["FRAMING"].state == "WITHHELD"
        assert windows["FRAMING"].window == TimeWindow("", "")

    def test_from_governor_decisions(self):
        """Unavailable time flows through the governor and then the classifier."""
        blocks = [create_block("c1", "09:30", "10:30", "commitment")]
        governor_input = make_input(
            baseline_windows=[
                create_baseline_window("FRAMING", 8, 12),
                create_baseline_window("REFLECTION", 20, 21),
            ]
        )
        governor_input.busy_blocks = unavailable_to_busy_blocks(blocks, TEST_DATE)
        decisions = Governor().evaluate_day(governor_input)

        windows = by_mode(compute_mode_windows(decisions, blocks))
        assert windows["FRAMING"].state == "DEFERRED"
        assert windows["FRAMING"].window == TimeWindow("08:00", "12:00")
        assert windows["REFLECTION"].state == "AVAILABLE"
        assert windows["EVALUATION"].state == "WITHHELD"

    def test_timezone_aware_decisions(self):
        decision = ModeGovernanceDecision(
            mode="FRAMING",
            decision="PERMIT",
            reason="Window is structurally reliable and unconflicted.",
            computed_at="2024-01-15T07:00:00.000Z",
            window=TimeSegment(start="2024-01-15T14:00:00Z", end="2024-01-15T16:00:00Z"),
        )
        windows = by_mode(compute_mode_windows([decision], tz_name="America/New_York"))
        assert windows["FRAMING"].window == TimeWindow("09:00", "11:00")


class TestOrdering:
    def test_sort_by_discovery_risk(self):
        decisions = [
            silence("EXECUTION"),
            silence("SYNTHESIS"),
            silence("EVALUATION"),
        ]
        ordered = sort_by_discovery_risk(compute_mode_windows(decisions))
        assert [mw.mode for mw in ordered] == ["EVALUATION", "SYNTHESIS", "EXECUTION"]

    def test_count_flagged_modes(self):
        decisions = [permit("FRAMING", 9, 11), silence("EVALUATION"), permit("REFLECTION", 20, 21)]
        assert count_flagged_modes(compute_mode_windows(decisions)) == 1
