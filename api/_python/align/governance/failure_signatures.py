"""
Failure signatures indexed by mode and state.

Concrete consequences only, descriptive rather than prescriptive.
"""

from ..types import DiscoveryWindow, FailureSignature, Mode, ModeStateValue

FAILURE_SIGNATURES: dict[Mode, dict[str, FailureSignature]] = {
    "EVALUATION": {
        "INTACT": FailureSignature(
            consequence="Conditions support clear judgment",
            discovery_window="IMMEDIATE",
        ),
        "WITHHELD": FailureSignature(
            consequence=(
                "You might make a decision that feels right but isn't, "
                "and not realize until later"
            ),
            discovery_window="TOO_LATE",
            override_advice=(
                "If you decide now, plan to explicitly revisit tomorrow with fresh "
                "conditions and reconsider the decision"
            ),
        ),
    },
    "FRAMING": {
        "INTACT": FailureSignature(
            consequence="Good time to define the problem",
            discovery_window="IMMEDIATE",
        ),
        "DEFERRED": FailureSignature(
            consequence=(
                "Starting mid-stream or with interruptions might lead to incomplete "
                "problem definition"
            ),
            discovery_window="TOO_LATE",
            override_advice=(
                "If starting late or with interruptions, explicitly note what context "
                "you might be missing"
            ),
        ),
        "WITHHELD": FailureSignature(
            consequence="Problem definition is not supported right now",
            discovery_window="TOO_LATE",
        ),
    },
    "SYNTHESIS": {
        "INTACT": FailureSignature(
            consequence="Good window to integrate ideas",
            discovery_window="IMMEDIATE",
        ),
        "FRAGMENTED": FailureSignature(
            consequence="This might feel complete but need rework when you review it tomorrow",
            discovery_window="TOMORROW",
            override_advice="Draft now if you can review it tomorrow to catch gaps in coherence",
        ),
        "WITHHELD": FailureSignature(
            consequence="Integration is not supported right now",
            discovery_window="TOMORROW",
        ),
    },
    "EXECUTION": {
        "INTACT": FailureSignature(
            consequence="Flow conditions",
            discovery_window="IMMEDIATE",
        ),
        "STRAINED": FailureSignature(
            consequence="You'll make more mistakes but catch them immediately",
            discovery_window="IMMEDIATE",
            override_advice=(
                "Errors are obvious and correctable; fine to continue for work with "
                "fast feedback (coding with tests, email triage, ops work)"
            ),
        ),
        "WITHHELD": FailureSignature(
            consequence="Execution is severely degraded",
            discovery_window="IMMEDIATE",
        ),
    },
    "REFLECTION": {
        "AVAILABLE": FailureSignature(
            consequence="Rare protected window; good time to step back",
            discovery_window="IMMEDIATE",
        ),
        "SILENCE": FailureSignature(
            consequence="",
            discovery_window="IMMEDIATE",
        ),
    },
}

# Higher = more urgent = shown first
DISCOVERY_PRIORITY: dict[DiscoveryWindow, int] = {
    "TOO_LATE": 3,
    "TOMORROW": 2,
    "IMMEDIATE": 1,
}


def get_failure_signature(mode: Mode, state: ModeStateValue) -> FailureSignature | None:
    """Failure signature for a mode and state, or None if the state is not valid for the mode."""
    return FAILURE_SIGNATURES.get(mode, {}).get(state)
