"""
Stage 6: Spectral Analyzer

Zero-pads the windowed signal to N (next power of two, or the exact length
when config.pad_to_power_of_two is off), runs a single-precision forward DFT
and keeps |X[k]| for every k in [0, N).
"""

import logging

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.stages.base import EmptyInput
from pitchmind.types import Spectrum


logger = logging.getLogger(__name__)

CONTRACT = StageContract(
    name="spectrum",
    requires=frozenset({"signal/windowed"}),
    produces=frozenset({"spectrum/magnitude"}),
    version="1.0.0",
)


class SpectrumStage(Stage):
    """Stage 6: Magnitude spectrum."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        signal = ctx.get("signal/windowed")
        length = len(signal.samples)
        if length == 0:
            raise EmptyInput(self.contract.name, detail={"signal_length": 0})

        if ctx.config.pad_to_power_of_two:
            fft_size = audio.next_power_of_two(length)
        else:
            fft_size = length

        magnitudes = audio.magnitude_spectrum(signal.samples, fft_size)
        logger.debug(
            "FFT size %d for %d samples (bin width %.4f Hz)",
            fft_size, length, signal.sample_rate / fft_size,
        )

        return {
            "spectrum/magnitude": Spectrum(
                magnitudes=magnitudes,
                sample_rate=signal.sample_rate,
                signal_length=length,
            )
        }

    def describe(self, outputs: dict) -> dict:
        spectrum = outputs["spectrum/magnitude"]
        return {
            "fft_size": spectrum.fft_size,
            "signal_length": spectrum.signal_length,
            "bin_width_hz": spectrum.bin_width_hz,
        }
