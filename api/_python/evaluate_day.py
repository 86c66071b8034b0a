#!/usr/bin/env python3
"""
Evaluate governance decisions from a JSON request file.

Usage: python3 evaluate_day.py <request_file.json> [--ics] [--verbose]

Reads a day's profile, baseline windows and unavailable time from a JSON
file and writes the decisions as JSON (or an iCalendar document with --ics)
to stdout.

Request shape:
    {
      "day": "2024-01-15",
      "timezone": "America/New_York",            (optional)
      "profile": {"chronotype": "MERIDIAN", "confidence": "HIGH",
                  "computedAt": "..."} | null,
      "baselineWindows": [{"mode", "start", "end", "reliability"}],
      "busyBlocks": [{"start", "end", "allDay", "source"}],   (optional)
      "unavailableTimes": [{"id", "start", "end", "label", "breakType"}]  (optional)
    }
"""

import json
import logging
import sys

from align.export import decisions_to_dict, generate_ics
from align.governance.evaluator import Governor
from align.time_math import parse_iso_datetime
from align.types import (
    BaselineWindow,
    BusyBlock,
    ChronotypeProfile,
    GovernorInput,
    UnavailableBlock,
)
from align.unavailable import unavailable_to_busy_blocks

USAGE = "Usage: evaluate_day.py <request_file.json> [--ics] [--verbose]"


def build_input(data: dict) -> GovernorInput:
    """Build governor input from a parsed request."""
    day = data["day"]
    tz_name = data.get("timezone")

    profile_data = data.get("profile")
    profile = None
    if profile_data is not None:
        profile = ChronotypeProfile(
            chronotype=profile_data["chronotype"],
            confidence=profile_data["confidence"],
            computed_at=profile_data.get("computedAt", ""),
        )

    baseline_windows = [
        BaselineWindow(
            mode=w["mode"],
            start=w["start"],
            end=w["end"],
            reliability=w["reliability"],
            source=w.get("source", "baseline"),
        )
        for w in data.get("baselineWindows", [])
    ]

    busy_blocks = [
        BusyBlock(
            start=parse_iso_datetime(b["start"]),
            end=parse_iso_datetime(b["end"]),
            all_day=b.get("allDay", False),
            source=b.get("source", "manual"),
            id=b.get("id"),
        )
        for b in data.get("busyBlocks", [])
    ]

    unavailable = [
        UnavailableBlock(
            id=u["id"],
            start=u["start"],
            end=u["end"],
            label=u.get("label"),
            break_type=u.get("breakType"),
        )
        for u in data.get("unavailableTimes", [])
    ]
    busy_blocks += unavailable_to_busy_blocks(unavailable, day, tz_name)

    return GovernorInput(
        profile=profile,
        busy_blocks=busy_blocks,
        baseline_windows=baseline_windows,
        day_iso_date=day,
    )


def main() -> None:
    args = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    flags = {arg for arg in sys.argv[1:] if arg.startswith("--")}

    if len(args) != 1 or not flags <= {"--ics", "--verbose"}:
        print(json.dumps({"error": USAGE}))
        sys.exit(1)

    if "--verbose" in flags:
        logging.basicConfig(
            stream=sys.stderr,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    request_file = args[0]

    try:
        with open(request_file) as f:
            data = json.load(f)

        governor_input = build_input(data)
        decisions = Governor().evaluate_day(governor_input)

        if "--ics" in flags:
            sys.stdout.write(
                generate_ics(decisions, governor_input.day_iso_date, tz_name=data.get("timezone"))
            )
        else:
            print(
                json.dumps(
                    {"day": governor_input.day_iso_date, "decisions": decisions_to_dict(decisions)}
                )
            )

    except FileNotFoundError:
        print(json.dumps({"error": f"Request file not found: {request_file}"}))
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(json.dumps({"error": f"Invalid JSON in request file: {e}"}))
        sys.exit(1)
    except KeyError as e:
        print(json.dumps({"error": f"Missing required field: {e}"}))
        sys.exit(1)
    except (TypeError, ValueError) as e:
        print(json.dumps({"error": f"Invalid request: {e}"}))
        sys.exit(1)


if __name__ == "__main__":
    main()
