"""
PitchMind v1 Utilities - Shared helper functions.

Responsibilities:
- Time formatting for stage events
- JSON serialization helpers
- Rounding helpers shared by the decimator and the note mapper

Invariants:
- All timestamps use ISO-8601 format with an explicit UTC offset
- Rounding is half away from zero (never banker's rounding)
"""

import json
import math
from datetime import datetime, timezone
from typing import Any, Mapping


def now_iso() -> str:
    """
    Return current time as ISO-8601 with explicit UTC offset.

    Returns:
        ISO-8601 formatted string, e.g., "2025-12-23T17:02:10.123456+00:00"
    """
    return datetime.now(timezone.utc).isoformat()


def serialize_json(data: Mapping[str, Any]) -> str:
    """
    Serialize dictionary to JSON deterministically.

    Args:
        data: Dictionary to serialize.

    Returns:
        JSON string with sorted keys, 2-space indent, trailing newline.
    """
    return json.dumps(data, indent=2, sort_keys=True) + "\n"


def round_half_away(value: float) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's built-in round() resolves ties to even, so 60.5 would become 60
    instead of 61.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
