"""
PitchMind v1 Result Rendering.

Text lines (for terminals) and a JSON-ready dictionary
(schemas/pitch_result.schema.json) for a PitchResult.
"""

from typing import Any

from pitchmind.types import PitchResult


def render_text(result: PitchResult) -> list[str]:
    """
    Render a result as output lines.

    In range:
        Dominant frequency: 440.00 Hz
        Closest musical note: A4
    Out of range:
        Dominant frequency: 5000.00 Hz
        Dominant frequency out of expected range: 5000.00 Hz
    """
    lines = [f"Dominant frequency: {result.frequency_hz:.2f} Hz"]
    if result.in_range and result.note is not None:
        lines.append(f"Closest musical note: {result.note.label}")
    else:
        lines.append(f"Dominant frequency out of expected range: {result.frequency_hz:.2f} Hz")
    return lines


def result_to_dict(result: PitchResult) -> dict[str, Any]:
    """Serialize to dictionary."""
    note = None
    if result.note is not None:
        note = {
            "letter": result.note.letter,
            "octave": result.note.octave,
            "midi": result.note.midi,
            "label": result.note.label,
        }
    return {
        "frequency_hz": float(result.frequency_hz),
        "in_range": result.in_range,
        "note": note,
        "cents": None if result.cents is None else float(result.cents),
    }
