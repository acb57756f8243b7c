"""
PitchMind v1 Test Configuration

Provides synthetic tones, AudioStream builders and WAV fixtures.
"""

import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest

from pitchmind import audio
from pitchmind.types import AudioStream


SAMPLE_RATE = 44100


def run_cli(*args: str) -> subprocess.CompletedProcess:
    """Run pitchmind CLI as subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "pitchmind", *args],
        capture_output=True,
        text=True,
    )


def sine(
    frequency: float,
    duration_sec: float = 1.0,
    sample_rate: int = SAMPLE_RATE,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Deterministic float64 sine tone."""
    t = np.arange(int(sample_rate * duration_sec)) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def int16_stream(
    samples: np.ndarray,
    sample_rate: int = SAMPLE_RATE,
    channels: int = 1,
) -> AudioStream:
    """Quantize float samples to a 16-bit integer AudioStream."""
    raw = np.round(np.asarray(samples) * 32767).astype(np.int16)
    return AudioStream(
        samples=raw,
        bits_per_sample=16,
        sample_format="int",
        channels=channels,
        sample_rate=sample_rate,
    )


def int24_stream(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> AudioStream:
    """Quantize float samples to 24-bit words left-justified in int32."""
    words = np.round(np.asarray(samples) * (2 ** 23 - 1)).astype(np.int32)
    return AudioStream(
        samples=words << 8,
        bits_per_sample=24,
        sample_format="int",
        channels=1,
        sample_rate=sample_rate,
    )


def interleave(*channels: np.ndarray) -> np.ndarray:
    """Interleave equal-length channel arrays frame by frame."""
    return np.stack(channels, axis=1).reshape(-1)


def create_test_wav(
    path: Path,
    frequency: float = 440.0,
    duration_sec: float = 1.0,
    sample_rate: int = SAMPLE_RATE,
    channels: int = 1,
    subtype: str = "PCM_16",
) -> None:
    """
    Create a WAV file holding a pure tone.

    Args:
        path: Output path
        frequency: Tone frequency in Hz
        duration_sec: Duration in seconds
        sample_rate: Sample rate in Hz
        channels: Number of identical channels
        subtype: soundfile subtype
    """
    tone = sine(frequency, duration_sec, sample_rate)
    if channels > 1:
        tone = np.tile(tone[:, None], (1, channels))
    audio.write_wav(path, tone, sample_rate, subtype=subtype)


@pytest.fixture
def tone_wav_path(tmp_path) -> Path:
    """A one-second 440 Hz mono 16-bit WAV."""
    wav_path = tmp_path / "a4.wav"
    create_test_wav(wav_path)
    return wav_path


@pytest.fixture
def a4_stream() -> AudioStream:
    """A one-second 440 Hz mono 16-bit stream at 44.1 kHz."""
    return int16_stream(sine(440.0))
