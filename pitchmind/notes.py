"""
PitchMind v1 Note Mapping

Frequency (Hz) → nearest equal-tempered note under the MIDI convention:
A4 = MIDI 69 = reference_hz, octave 4 spans MIDI 60–71, octave = n // 12 - 1.
"""

import math

from pitchmind.types import NOTE_NAMES, NoteName, PitchResult
from pitchmind.utils import round_half_away


REFERENCE_MIDI = 69
SEMITONES_PER_OCTAVE = 12
CENTS_PER_OCTAVE = 1200


def midi_number(frequency_hz: float, reference_hz: float = 440.0) -> float:
    """Continuous MIDI note number: 12 * log2(f / ref) + 69."""
    return SEMITONES_PER_OCTAVE * math.log2(frequency_hz / reference_hz) + REFERENCE_MIDI


def midi_to_note(midi: int) -> NoteName:
    """Note letter and octave for an integer MIDI number (negatives allowed)."""
    return NoteName(
        letter=NOTE_NAMES[midi % SEMITONES_PER_OCTAVE],
        octave=midi // SEMITONES_PER_OCTAVE - 1,
    )


def midi_to_frequency(midi: int, reference_hz: float = 440.0) -> float:
    """Equal-tempered frequency of a MIDI number."""
    return reference_hz * 2.0 ** ((midi - REFERENCE_MIDI) / SEMITONES_PER_OCTAVE)


def frequency_to_note(
    frequency_hz: float,
    reference_hz: float = 440.0,
    min_hz: float = 20.0,
    max_hz: float = 4000.0,
) -> PitchResult:
    """
    Map a frequency to the nearest note.

    Args:
        frequency_hz: Detected frequency
        reference_hz: Frequency of A4
        min_hz: Lowest accepted frequency (inclusive)
        max_hz: Highest accepted frequency (inclusive)

    Returns:
        PitchResult; out-of-band frequencies give in_range=False and no note.
    """
    if not min_hz <= frequency_hz <= max_hz:
        return PitchResult(frequency_hz=frequency_hz, note=None, in_range=False)

    midi = round_half_away(midi_number(frequency_hz, reference_hz))
    note_hz = midi_to_frequency(midi, reference_hz)
    cents = CENTS_PER_OCTAVE * math.log2(frequency_hz / note_hz)

    return PitchResult(
        frequency_hz=frequency_hz,
        note=midi_to_note(midi),
        in_range=True,
        cents=cents,
    )
