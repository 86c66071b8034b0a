"""
Data structures for reliability governance.

All values are created fresh for a single evaluation call. Inputs and
classification results are frozen so the engine never mutates caller data.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

# =============================================================================
# Modes and profile
# =============================================================================

Mode = Literal[
    "FRAMING",  # Defining the problem and the decision space
    "EVALUATION",  # Comparing options and making tradeoffs
    "SYNTHESIS",  # Integrating information into a coherent view
    "EXECUTION",  # Acting on an already-made decision
    "REFLECTION",  # Looking back, not deciding forward
]

ALL_MODES: tuple[Mode, ...] = ("FRAMING", "EVALUATION", "SYNTHESIS", "EXECUTION", "REFLECTION")

Chronotype = Literal["AURORA", "DAYBREAK", "MERIDIAN", "TWILIGHT", "NOCTURNE"]

ChronotypeConfidence = Literal["HIGH", "MED", "LOW"]


@dataclass(frozen=True)
class ChronotypeProfile:
    """Chronotype result from the quiz (scored elsewhere)."""

    chronotype: Chronotype
    confidence: ChronotypeConfidence
    computed_at: str  # ISO timestamp


# =============================================================================
# Input intervals
# =============================================================================

BaselineReliability = Literal["RELIABLE", "FRAGILE"]

BreakType = Literal["commitment", "rest", "unclassified"]

BusySource = Literal["manual", "google", "microsoft"]


@dataclass(frozen=True)
class TimeWindow:
    """Half-open wall-clock interval."""

    start: str  # "HH:MM"
    end: str  # "HH:MM", may exceed "24:00" for windows crossing midnight


@dataclass(frozen=True)
class BaselineWindow:
    """Candidate window for one mode on one day, derived from chronotype templates."""

    mode: Mode
    start: str  # ISO timestamp
    end: str  # ISO timestamp
    reliability: BaselineReliability
    source: str = "baseline"


@dataclass(frozen=True)
class BusyBlock:
    """Calendar busy time on an absolute timeline (structure only, no titles)."""

    start: datetime
    end: datetime
    all_day: bool = False
    source: BusySource = "manual"
    id: str | None = None


@dataclass(frozen=True)
class UnavailableBlock:
    """User-declared unavailable time on the wall clock."""

    id: str
    start: str  # "HH:MM"
    end: str  # "HH:MM"
    label: str | None = None
    break_type: BreakType | None = None

    @property
    def effective_break_type(self) -> BreakType:
        """Declared break type, or "unclassified" when none was given."""
        return self.break_type or "unclassified"


@dataclass(frozen=True)
class FixedBlockConstraint:
    """One-off unavailable period for a specific date (already validated)."""

    id: str
    date_iso: str  # "YYYY-MM-DD"
    start_local: str | None = None  # "HH:MM", unset for all-day records
    end_local: str | None = None
    all_day: bool = False
    label: str | None = None
    break_type: BreakType | None = None


# =============================================================================
# Break classification
# =============================================================================

BreakClassification = Literal["restorative", "fragmenting"]

WindowStatus = Literal[
    "clear",  # No fragmenting breaks (restorative-only windows included)
    "fragmented",  # Fragmenting breaks (Synthesis, Execution, Reflection)
    "disrupted",  # Fragmenting breaks (Framing)
    "withheld",  # Too fragmented to attempt (Evaluation)
]


@dataclass(frozen=True)
class ClassifiedBreak:
    """An unavailable block clipped to a mode window, with its verdict."""

    id: str
    start: str  # "HH:MM", clipped to the window
    end: str  # "HH:MM", clipped to the window
    break_type: BreakType
    duration_minutes: int
    classification: BreakClassification
    reason: str
    label: str | None = None


@dataclass(frozen=True)
class AvailableSegment:
    """Maximal sub-interval of a window not covered by fragmenting breaks."""

    start: str
    end: str
    duration_minutes: int
    viable: bool


@dataclass
class BreakAssessment:
    """Classifier output for one (mode, window) pair."""

    breaks: list[ClassifiedBreak]
    segments: list[AvailableSegment]
    overall_status: WindowStatus
    total_available_minutes: int
    availability_percent: float  # 0-1
    fragmenting_break_count: int
    restorative_break_count: int


# =============================================================================
# Governor
# =============================================================================

GovernanceVerdict = Literal["PERMIT", "FRAGMENTED", "SILENCE"]


@dataclass(frozen=True)
class TimeSegment:
    """Portion of a window on the absolute timeline."""

    start: str  # ISO timestamp
    end: str  # ISO timestamp


@dataclass
class ModeGovernanceDecision:
    """
    Final per-mode verdict for a day.

    window is set for PERMIT (the full window, or the single surviving segment).
    segments is set for FRAGMENTED. SILENCE carries neither.
    """

    mode: Mode
    decision: GovernanceVerdict
    reason: str  # Structural, byte-stable
    computed_at: str  # ISO timestamp, shared by every decision of one call
    window: TimeSegment | None = None
    segments: list[TimeSegment] | None = None


@dataclass
class GovernorInput:
    """Everything the governor needs for one day."""

    profile: ChronotypeProfile | None
    busy_blocks: list[BusyBlock] = field(default_factory=list)
    baseline_windows: list[BaselineWindow] = field(default_factory=list)
    day_iso_date: str = ""


# =============================================================================
# Mode states
# =============================================================================

# Each mode fails differently, so each has its own state set.
EvaluationState = Literal["INTACT", "WITHHELD"]  # Binary only
FramingState = Literal["INTACT", "DEFERRED", "WITHHELD"]
SynthesisState = Literal["INTACT", "FRAGMENTED", "WITHHELD"]
ExecutionState = Literal["INTACT", "STRAINED", "WITHHELD"]
ReflectionState = Literal["AVAILABLE", "SILENCE"]  # Opportunistic only

ModeStateValue = Literal[
    "INTACT", "DEFERRED", "FRAGMENTED", "STRAINED", "WITHHELD", "AVAILABLE", "SILENCE"
]

# When a user would notice a decision made under degraded conditions was wrong
DiscoveryWindow = Literal["IMMEDIATE", "TOMORROW", "TOO_LATE"]

FragmentationSeverity = Literal["LIGHT", "MODERATE", "SEVERE"]


@dataclass(frozen=True)
class FailureSignature:
    """What goes wrong in a mode state and when you'll know."""

    consequence: str
    discovery_window: DiscoveryWindow
    override_advice: str | None = None


@dataclass
class FragmentationAnalysis:
    """How a mode window is cut up by unavailable times (before classification)."""

    has_fragmentation: bool
    fragmentation_severity: FragmentationSeverity
    available_portions: list[TimeWindow]
    total_available_minutes: int
    percentage_available: float  # 0-1
    conflicts: list[UnavailableBlock]
    baseline_window: TimeWindow


@dataclass
class ModeWindow:
    """Mode-specific state for a day, with its failure signature."""

    mode: Mode
    state: ModeStateValue
    window: TimeWindow  # Always the full baseline span
    failure_signature: FailureSignature
    fragmentation: FragmentationAnalysis
