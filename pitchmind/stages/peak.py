"""
Stage 7: Peak Frequency Estimator

Searches bins [0, floor(N * search_range)) for the greatest magnitude and
converts the winning bin to Hz: k * sample_rate / N. Bins past the Nyquist
bin N // 2 mirror the lower half and are never searched.

Policies:
    - Ties resolve to the lowest index
    - Empty search range → bin 0
    - NaN magnitudes lose every comparison (logged, never raised)
"""

import logging

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.types import PeakEstimate


logger = logging.getLogger(__name__)

CONTRACT = StageContract(
    name="peak",
    requires=frozenset({"spectrum/magnitude"}),
    produces=frozenset({"peak/frequency"}),
    version="1.0.0",
)


class PeakStage(Stage):
    """Stage 7: Dominant bin → frequency."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        spectrum = ctx.get("spectrum/magnitude")
        limit = audio.search_limit(spectrum.fft_size, ctx.config.search_range)

        nan_count = audio.count_nan(spectrum.magnitudes[:limit])
        if nan_count:
            logger.warning("Ignoring %d NaN magnitude(s) in peak search", nan_count)

        index = audio.find_peak_bin(spectrum.magnitudes, limit)
        magnitude = float(spectrum.magnitudes[index]) if limit > 0 else 0.0
        frequency = spectrum.bin_frequency(index)

        logger.debug("Peak bin %d of %d searched → %.2f Hz", index, limit, frequency)
        return {
            "peak/frequency": PeakEstimate(
                bin_index=index,
                frequency_hz=frequency,
                magnitude=magnitude,
                fft_size=spectrum.fft_size,
                search_limit=limit,
            )
        }

    def describe(self, outputs: dict) -> dict:
        peak = outputs["peak/frequency"]
        return {
            "bin_index": peak.bin_index,
            "frequency_hz": peak.frequency_hz,
            "search_limit": peak.search_limit,
        }
