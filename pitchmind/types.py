"""
PitchMind v1 Data Model — frozen value types flowing through the pipeline.

All types are frozen dataclasses (or an Enum) — immutable, single-run values.

Flow:
    AudioStream → NormalizedSignal (interleaved) → NormalizedSignal (mono)
    → Spectrum → PeakEstimate → PitchResult

Invariants:
    - AudioStream samples are a read-only numpy array
    - NormalizedSignal samples are float32 in approximately [-1, 1]
    - Spectrum magnitudes are non-negative float32, len == fft_size
    - NoteName uses standard MIDI octave numbering (A4 = MIDI 69)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from pitchmind.stages.base import UnsupportedEncoding


# =============================================================================
# Sample Encodings
# =============================================================================


class SampleEncoding(Enum):
    """
    Supported PCM encodings: (bits_per_sample, sample_format).

    The full-scale divisor of an integer encoding is 2^(bits-1); float
    encodings are already normalized and have no divisor.
    """

    INT16 = (16, "int")
    INT24 = (24, "int")
    INT32 = (32, "int")
    FLOAT32 = (32, "float")

    @property
    def bits(self) -> int:
        return self.value[0]

    @property
    def sample_format(self) -> str:
        return self.value[1]

    @property
    def full_scale(self) -> float | None:
        """Normalization divisor, or None for float encodings."""
        if self.sample_format == "float":
            return None
        return float(2 ** (self.bits - 1))

    @classmethod
    def resolve(cls, bits: int, sample_format: str) -> "SampleEncoding":
        """
        Resolve a (bit depth, format) pair.

        Raises:
            UnsupportedEncoding: If the pair is not one of the four encodings.
        """
        for encoding in cls:
            if encoding.value == (bits, sample_format):
                return encoding
        raise UnsupportedEncoding(bits, sample_format)


# =============================================================================
# AudioStream — decoder output
# =============================================================================


@dataclass(frozen=True)
class AudioStream:
    """
    Decoded, interleaved raw sample words plus their format metadata.

    Attributes:
        samples: Raw sample words, interleaved by frame. Integer words for
            "int" formats (24-bit words left-justified in an int32 container),
            float words for "float".
        bits_per_sample: Declared bit depth (16, 24 or 32 are supported)
        sample_format: "int" or "float"
        channels: Number of interleaved channels
        sample_rate: Sample rate in Hz
    """

    samples: np.ndarray
    bits_per_sample: int
    sample_format: str
    channels: int
    sample_rate: int

    def __post_init__(self) -> None:
        samples = np.array(self.samples).reshape(-1)
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)

    @property
    def encoding(self) -> SampleEncoding:
        """Resolved encoding. Raises UnsupportedEncoding."""
        return SampleEncoding.resolve(self.bits_per_sample, self.sample_format)

    @property
    def num_frames(self) -> int:
        return len(self.samples) // self.channels if self.channels > 0 else 0

    @property
    def duration_sec(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.num_frames / self.sample_rate


# =============================================================================
# Intermediate Values
# =============================================================================


@dataclass(frozen=True)
class NormalizedSignal:
    """
    Float32 samples with the sample rate they are expressed in.

    channels > 1 only between the normalize and downmix stages.
    """

    samples: np.ndarray
    sample_rate: int
    channels: int = 1

    @property
    def duration_sec(self) -> float:
        return len(self.samples) / self.channels / self.sample_rate


@dataclass(frozen=True)
class Spectrum:
    """
    Magnitude spectrum of one analyzed block.

    Attributes:
        magnitudes: |X[k]| for k in [0, fft_size)
        sample_rate: Effective sample rate of the analyzed signal
        signal_length: Number of real samples before zero padding (M)
    """

    magnitudes: np.ndarray
    sample_rate: int
    signal_length: int

    @property
    def fft_size(self) -> int:
        return len(self.magnitudes)

    @property
    def bin_width_hz(self) -> float:
        return self.sample_rate / self.fft_size

    def bin_frequency(self, k: int) -> float:
        """Frequency in Hz of bin k (meaningful for k < fft_size / 2)."""
        return k * self.sample_rate / self.fft_size


@dataclass(frozen=True)
class PeakEstimate:
    """Dominant spectral bin and its frequency."""

    bin_index: int
    frequency_hz: float
    magnitude: float
    fft_size: int
    search_limit: int


# =============================================================================
# Results
# =============================================================================


NOTE_NAMES: tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)


@dataclass(frozen=True)
class NoteName:
    """Equal-tempered note: letter (sharps) and MIDI-convention octave."""

    letter: str
    octave: int

    @property
    def midi(self) -> int:
        """MIDI note number. C4 = 60, A4 = 69."""
        return (self.octave + 1) * 12 + NOTE_NAMES.index(self.letter)

    @property
    def label(self) -> str:
        """Scientific pitch notation, e.g. 'A4', 'C#5'."""
        return f"{self.letter}{self.octave}"


@dataclass(frozen=True)
class PitchResult:
    """
    Terminal artifact of one pipeline run.

    note and cents are None exactly when in_range is False.
    """

    frequency_hz: float
    note: NoteName | None
    in_range: bool
    cents: float | None = None
