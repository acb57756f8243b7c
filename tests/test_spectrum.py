"""
PitchMind v1 Spectral Analyzer Tests
"""

import numpy as np
import pytest

from pitchmind import audio
from pitchmind.config import PipelineConfig
from pitchmind.contracts import StageContext
from pitchmind.stages.base import EmptyInput
from pitchmind.stages.spectrum import SpectrumStage
from pitchmind.types import NormalizedSignal


def _tone(length: int, cycles: float) -> np.ndarray:
    n = np.arange(length)
    return np.sin(2 * np.pi * cycles * n / length).astype(np.float32)


class TestNextPowerOfTwo:

    @pytest.mark.parametrize("n,expected", [
        (0, 1), (1, 1), (2, 2), (3, 4), (4, 4), (5, 8),
        (1000, 1024), (1024, 1024), (44100, 65536),
    ])
    def test_values(self, n, expected):
        assert audio.next_power_of_two(n) == expected


class TestMagnitudeSpectrum:
    """Test zero-padded DFT magnitudes."""

    def test_dc_signal(self):
        mags = audio.magnitude_spectrum(np.ones(8, dtype=np.float32), 8)
        assert mags[0] == pytest.approx(8.0, rel=1e-6)
        np.testing.assert_allclose(mags[1:], 0.0, atol=1e-5)

    def test_impulse_is_flat_after_padding(self):
        mags = audio.magnitude_spectrum(np.array([1.0], dtype=np.float32), 4)
        np.testing.assert_allclose(mags, [1.0, 1.0, 1.0, 1.0])

    def test_length_and_dtype(self):
        mags = audio.magnitude_spectrum(_tone(300, 10), 512)
        assert len(mags) == 512
        assert mags.dtype == np.float32
        assert np.all(mags >= 0)

    def test_integer_cycle_tone_peaks_at_its_bin(self):
        mags = audio.magnitude_spectrum(_tone(256, 16), 256)
        assert int(np.argmax(mags[:129])) == 16

    def test_padding_is_idempotent_for_power_of_two_length(self):
        """A power-of-two input transforms identically with or without padding."""
        samples = _tone(256, 16.5)
        padded = audio.magnitude_spectrum(samples, audio.next_power_of_two(len(samples)))
        exact = audio.magnitude_spectrum(samples, len(samples))
        np.testing.assert_array_equal(padded, exact)

    def test_fft_size_smaller_than_signal_raises(self):
        with pytest.raises(ValueError, match="smaller than signal length"):
            audio.magnitude_spectrum(np.zeros(10, dtype=np.float32), 8)

    def test_input_not_modified(self):
        samples = _tone(16, 2)
        before = samples.copy()
        audio.magnitude_spectrum(samples, 32)
        np.testing.assert_array_equal(samples, before)


class TestSpectrumStage:
    """Test the spectrum stage's transform-size modes."""

    def _run(self, length: int, pad: bool):
        ctx = StageContext(
            config=PipelineConfig(pad_to_power_of_two=pad),
            values={"signal/windowed": NormalizedSignal(_tone(length, 5), sample_rate=8000)},
        )
        return SpectrumStage().run(ctx)["spectrum/magnitude"]

    def test_pads_to_next_power_of_two(self):
        spectrum = self._run(300, pad=True)
        assert spectrum.fft_size == 512
        assert spectrum.signal_length == 300
        assert spectrum.bin_width_hz == pytest.approx(8000 / 512)

    def test_exact_length_mode(self):
        spectrum = self._run(300, pad=False)
        assert spectrum.fft_size == 300

    def test_empty_signal_raises(self):
        ctx = StageContext(
            config=PipelineConfig(),
            values={"signal/windowed": NormalizedSignal(np.zeros(0, dtype=np.float32), 8000)},
        )
        with pytest.raises(EmptyInput) as exc_info:
            SpectrumStage().run(ctx)
        assert exc_info.value.stage == "spectrum"
