"""
Export of governance decisions.

- iCalendar: one event per PERMIT window, one per FRAGMENTED segment
- JSON: the decision array for a day, camelCase keys
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import pytz

from .time_math import parse_iso_datetime
from .types import Mode, ModeGovernanceDecision, TimeSegment

ICS_MAX_LINE_LENGTH = 75

# Concise mode copy: definition + examples
MODES_COPY: dict[Mode, dict[str, Any]] = {
    "FRAMING": {
        "definition": "Defining the problem and the decision space.",
        "examples": [
            "Defining the question for a strategy discussion",
            "Deciding what problem to solve before jumping to solutions",
            "Writing a brief or decision memo outline",
            'Asking "what are we actually deciding here?"',
        ],
    },
    "EVALUATION": {
        "definition": "Comparing options and making tradeoffs.",
        "examples": [
            "Comparing vendors or tools",
            "Deciding between two job offers",
            "Reviewing pros and cons",
            "Investment decisions",
        ],
    },
    "SYNTHESIS": {
        "definition": "Integrating information into a coherent view.",
        "examples": [
            "Making sense of user research",
            "Pulling insights from multiple meetings",
            "Connecting dots across data, feedback, and intuition",
            "Preparing a recommendation",
        ],
    },
    "EXECUTION": {
        "definition": "Acting on an already-made decision.",
        "examples": [
            "Writing emails based on a decided approach",
            "Implementing a plan",
            "Shipping work",
            "Doing tasks that require focus but not judgment",
        ],
    },
    "REFLECTION": {
        "definition": "Looking back, not deciding forward.",
        "examples": [
            "Post-mortems",
            "Journaling",
            "Reviewing a day or week",
            "Asking \"what worked / what didn't?\"",
        ],
    },
}


def format_ics_datetime(dt: datetime, tz_name: str | None = None) -> str:
    """
    Format an ICS date-time.

    - Naive: floating local time, YYYYMMDDTHHMMSS
    - Aware with tz_name: floating wall-clock time in that timezone
    - Aware without tz_name: UTC with a trailing "Z"
    """
    if dt.tzinfo is None:
        return dt.strftime("%Y%m%dT%H%M%S")
    if tz_name is not None:
        return dt.astimezone(pytz.timezone(tz_name)).strftime("%Y%m%dT%H%M%S")
    return dt.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")


def escape_ics_text(text: str) -> str:
    """Escape backslashes, semicolons, commas and newlines for ICS text fields."""
    return (
        text.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line to 75 characters; continuation lines start with a space."""
    if len(line) <= ICS_MAX_LINE_LENGTH:
        return line

    parts = [line[:ICS_MAX_LINE_LENGTH]]
    remaining = line[ICS_MAX_LINE_LENGTH:]
    while remaining:
        parts.append(" " + remaining[: ICS_MAX_LINE_LENGTH - 1])
        remaining = remaining[ICS_MAX_LINE_LENGTH - 1 :]
    return "\r\n".join(parts)


def _segment_event(
    mode: Mode, segment: TimeSegment, is_fragmented: bool, dtstamp: str, tz_name: str | None
) -> str:
    copy = MODES_COPY[mode]
    title = f"Align: {mode} (Segment)" if is_fragmented else f"Align: {mode}"

    description_parts = [
        copy["definition"],
        "",
        "Examples:",
        *[f"- {example}" for example in copy["examples"]],
        "",
        "Status: Structurally reliable.",
    ]
    if is_fragmented:
        description_parts += [
            "",
            "This is a segment. The baseline window is split by unavailable time(s).",
        ]
    description_parts += ["", "Align does not schedule for you. Importing is optional."]
    description = "\n".join(description_parts)

    lines = [
        "BEGIN:VEVENT",
        f"UID:{uuid4()}@align",
        f"DTSTAMP:{dtstamp}",
        f"DTSTART:{format_ics_datetime(parse_iso_datetime(segment.start), tz_name)}",
        f"DTEND:{format_ics_datetime(parse_iso_datetime(segment.end), tz_name)}",
        fold_line(f"SUMMARY:{escape_ics_text(title)}"),
        fold_line(f"DESCRIPTION:{escape_ics_text(description)}"),
        "END:VEVENT",
    ]
    return "\r\n".join(lines)


def generate_ics(
    decisions: Iterable[ModeGovernanceDecision],
    day_iso: str,
    now: datetime | None = None,
    tz_name: str | None = None,
) -> str:
    """
    Build an iCalendar document for a day's decisions.

    SILENCE decisions produce no events.

    Args:
        decisions: Governor decisions for the day
        day_iso: "YYYY-MM-DD", used in the calendar name
        now: DTSTAMP time (defaults to the current UTC time)
        tz_name: IANA timezone for event times; without it offset timestamps
            are written in UTC

    Returns:
        ICS text with CRLF line endings
    """
    dtstamp = format_ics_datetime(now or datetime.now(UTC))
    events = []

    for decision in decisions:
        if decision.decision == "PERMIT" and decision.window is not None:
            events.append(_segment_event(decision.mode, decision.window, False, dtstamp, tz_name))
        elif decision.decision == "FRAGMENTED" and decision.segments:
            for segment in decision.segments:
                events.append(_segment_event(decision.mode, segment, True, dtstamp, tz_name))

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Align//Align Governor//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:Align {day_iso}",
        *events,
        "END:VCALENDAR",
    ]
    return "\r\n".join(lines) + "\r\n"


def _segment_to_dict(segment: TimeSegment) -> dict[str, str]:
    return {"start": segment.start, "end": segment.end}


def decision_to_dict(decision: ModeGovernanceDecision) -> dict[str, Any]:
    """JSON-ready dict for one decision; absent window/segments are omitted."""
    result: dict[str, Any] = {
        "mode": decision.mode,
        "decision": decision.decision,
        "reason": decision.reason,
    }
    if decision.window is not None:
        result["window"] = _segment_to_dict(decision.window)
    if decision.segments is not None:
        result["segments"] = [_segment_to_dict(s) for s in decision.segments]
    result["computedAt"] = decision.computed_at
    return result


def decisions_to_dict(decisions: Iterable[ModeGovernanceDecision]) -> list[dict[str, Any]]:
    """JSON-ready list mirroring the decision array."""
    return [decision_to_dict(d) for d in decisions]


def export_days(
    decisions_by_day: dict[str, list[ModeGovernanceDecision]], exported_at: str
) -> dict[str, Any]:
    """JSON export of several days of decisions, keyed by ISO date."""
    return {
        "exportedAtISO": exported_at,
        "governorDecisions": {
            day: decisions_to_dict(decisions) for day, decisions in sorted(decisions_by_day.items())
        },
    }
