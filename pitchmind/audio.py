"""
PitchMind v1 Audio Utilities

Deterministic, CPU-only audio primitives: WAV decoding into AudioStream and
the pure numpy/scipy functions every pipeline stage is built from.

Library Stack:
    - soundfile: WAV I/O (libsndfile-backed)
    - numpy: Array operations
    - scipy.signal.windows: Hann window
    - scipy.fft: Discrete Fourier transform (single precision preserved)

INVARIANTS:
    - All operations are deterministic
    - No randomness, seeds, or time-based logic
    - Same input → identical output
    - Inputs are never modified in place

DELIBERATE SIMPLIFICATIONS:
    - Decimation is plain strided subsampling; no anti-aliasing low-pass
      filter runs first, so content above the new Nyquist limit aliases.
"""

import math
from pathlib import Path

import numpy as np
import scipy.fft
import soundfile as sf
from scipy.signal import windows

from pitchmind.stages.base import UnsupportedEncoding
from pitchmind.types import AudioStream, SampleEncoding
from pitchmind.utils import round_half_away


# =============================================================================
# Constants
# =============================================================================

# soundfile subtype → (bits_per_sample, sample_format, read dtype)
# PCM_24 is read as int32: libsndfile left-justifies 24-bit words, which is
# the packed layout normalize_samples() expects for SampleEncoding.INT24.
SUBTYPE_FORMATS: dict[str, tuple[int, str, str]] = {
    "PCM_U8": (8, "int", "int16"),
    "PCM_16": (16, "int", "int16"),
    "PCM_24": (24, "int", "int32"),
    "PCM_32": (32, "int", "int32"),
    "FLOAT": (32, "float", "float32"),
    "DOUBLE": (64, "float", "float64"),
}

INT24_CONTAINER_SHIFT = 8


# =============================================================================
# WAV I/O
# =============================================================================


def read_wav(path: Path) -> AudioStream:
    """
    Decode a WAV file into an AudioStream of raw interleaved sample words.

    Args:
        path: Path to WAV file

    Returns:
        AudioStream with the file's bit depth, format, channels and rate.

    Raises:
        UnsupportedEncoding: If the file's subtype has no known bit depth.
        soundfile.LibsndfileError: If the file cannot be read.

    Note:
        8-bit and 64-bit files decode fine here; the pipeline rejects them.
    """
    info = sf.info(str(path))
    if info.subtype not in SUBTYPE_FORMATS:
        raise UnsupportedEncoding(None, info.subtype, stage="decode")

    bits, sample_format, dtype = SUBTYPE_FORMATS[info.subtype]
    frames, sr = sf.read(str(path), dtype=dtype, always_2d=True)

    # (frames, channels) in C order flattens to interleaved words
    return AudioStream(
        samples=frames.reshape(-1),
        bits_per_sample=bits,
        sample_format=sample_format,
        channels=info.channels,
        sample_rate=sr,
    )


def write_wav(
    path: Path,
    samples: np.ndarray,
    sample_rate: int,
    subtype: str = "PCM_16",
) -> None:
    """
    Write float samples to a WAV file.

    Args:
        path: Output path
        samples: Audio samples (float, [-1, 1]); 2-D arrays are (frames, channels)
        sample_rate: Sample rate in Hz
        subtype: soundfile subtype (default: PCM_16)

    Note:
        - Hard clips to [-1, 1] before writing
        - Deterministic output (no dithering)
    """
    clipped = np.clip(samples, -1.0, 1.0)
    sf.write(str(path), clipped, sample_rate, subtype=subtype)


# =============================================================================
# Sample Normalization
# =============================================================================


def normalize_samples(raw: np.ndarray, encoding: SampleEncoding) -> np.ndarray:
    """
    Convert raw sample words to float32 in [-1, 1].

    Args:
        raw: Raw sample words
        encoding: Resolved encoding of the words

    Returns:
        float32 array, same length as raw.

    Note:
        - INT16 / INT32: divide by full scale 2^(bits-1)
        - INT24: arithmetic shift right by 8 (32-bit container), then / 2^23
        - FLOAT32: passed through unchanged
    """
    raw = np.asarray(raw)

    if encoding is SampleEncoding.FLOAT32:
        return raw.astype(np.float32)

    if encoding is SampleEncoding.INT24:
        words = raw.astype(np.int64) >> INT24_CONTAINER_SHIFT
    elif encoding in (SampleEncoding.INT16, SampleEncoding.INT32):
        words = raw.astype(np.int64)
    else:
        raise UnsupportedEncoding(encoding.bits, encoding.sample_format, stage="normalize")

    return (words.astype(np.float64) / encoding.full_scale).astype(np.float32)


# =============================================================================
# Channel Reduction & Decimation
# =============================================================================


def downmix(samples: np.ndarray, channels: int) -> np.ndarray:
    """
    Average interleaved frames to mono.

    Args:
        samples: Interleaved samples (1D)
        channels: Number of interleaved channels

    Returns:
        Mono samples of length len(samples) // channels.

    Note:
        Trailing samples that do not fill a complete frame are dropped.
    """
    if channels == 1:
        return samples

    num_frames = len(samples) // channels
    frames = samples[: num_frames * channels].reshape(num_frames, channels)
    return np.mean(frames, axis=1, dtype=np.float64).astype(np.float32)


def decimate(
    samples: np.ndarray,
    sample_rate: int,
    factor: int,
    max_duration_sec: float | None = None,
) -> tuple[np.ndarray, int]:
    """
    Keep every factor-th sample, then optionally cap the duration.

    Args:
        samples: Mono samples
        sample_rate: Input sample rate
        factor: Integer decimation factor (>= 1)
        max_duration_sec: Keep at most this many seconds (None = all)

    Returns:
        Tuple of (decimated samples, effective sample rate)

    Note:
        - No anti-aliasing filter (strided subsampling only)
        - Effective rate = sample_rate // factor
        - Cap length = round(effective_rate * max_duration_sec), ties away
          from zero
    """
    decimated = samples[::factor]
    effective_rate = sample_rate // factor

    if max_duration_sec is not None:
        max_samples = round_half_away(effective_rate * max_duration_sec)
        decimated = decimated[:max_samples]

    return decimated, effective_rate


# =============================================================================
# Windowing
# =============================================================================


def hann_window(length: int) -> np.ndarray:
    """
    Symmetric Hann coefficients 0.5 * (1 - cos(2*pi*n / (M-1))).

    A length-1 window is [1.0].
    """
    return windows.hann(length, sym=True)


def apply_hann(samples: np.ndarray) -> np.ndarray:
    """Multiply samples by a Hann window of the same length."""
    return (samples.astype(np.float64) * hann_window(len(samples))).astype(np.float32)


# =============================================================================
# Spectral Analysis
# =============================================================================


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def magnitude_spectrum(samples: np.ndarray, fft_size: int) -> np.ndarray:
    """
    Zero-pad to fft_size, run a forward DFT, return |X[k]|.

    Args:
        samples: Real samples (length M <= fft_size)
        fft_size: Transform length N

    Returns:
        float32 magnitudes of length fft_size.

    Raises:
        ValueError: If fft_size is smaller than the signal.
    """
    if fft_size < len(samples):
        raise ValueError(f"fft_size {fft_size} is smaller than signal length {len(samples)}")

    buffer = np.zeros(fft_size, dtype=np.complex64)
    buffer.real[: len(samples)] = samples

    transformed = scipy.fft.fft(buffer)
    return np.abs(transformed).astype(np.float32)


# =============================================================================
# Peak Search
# =============================================================================


def search_limit(fft_size: int, search_range: float) -> int:
    """
    Exclusive upper bin index searched.

    floor(fft_size * search_range), capped at the Nyquist bin (inclusive) so
    the mirrored upper half of a real signal's spectrum is never searched.
    """
    return min(int(math.floor(fft_size * search_range)), fft_size // 2 + 1)


def find_peak_bin(magnitudes: np.ndarray, limit: int) -> int:
    """
    Index of the greatest magnitude in magnitudes[:limit].

    Returns:
        Peak index; 0 when the range is empty.

    Note:
        - Ties resolve to the lowest index (first occurrence)
        - NaN is treated as the lowest possible magnitude
    """
    if limit <= 0:
        return 0

    window = magnitudes[:limit]
    cleaned = np.where(np.isnan(window), -np.inf, window)
    return int(np.argmax(cleaned))


def count_nan(values: np.ndarray) -> int:
    """Number of NaN entries."""
    return int(np.count_nonzero(np.isnan(values)))
