"""
Stage 4: Decimator

Keeps every D-th sample (no anti-aliasing filter) and optionally caps the
analyzed duration. D = 1 without a cap passes the signal through.

Invariants:
    - Effective rate = rate // D, and must stay >= 1 Hz
    - Zero samples after decimation/truncation is fatal (EmptyInput)
"""

import logging

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.stages.base import EmptyInput, InvalidStream
from pitchmind.types import NormalizedSignal


logger = logging.getLogger(__name__)

CONTRACT = StageContract(
    name="decimate",
    requires=frozenset({"signal/mono"}),
    produces=frozenset({"signal/decimated"}),
    version="1.0.0",
)


class DecimateStage(Stage):
    """Stage 4: Strided subsampling with optional duration cap."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        signal = ctx.get("signal/mono")
        factor = ctx.config.decimation_factor
        max_duration = ctx.config.max_duration_sec

        if factor == 1 and max_duration is None:
            return {"signal/decimated": signal}

        if signal.sample_rate // factor < 1:
            raise InvalidStream(
                self.contract.name,
                f"Decimation factor {factor} exceeds sample rate {signal.sample_rate}",
                detail={"decimation_factor": factor, "sample_rate": signal.sample_rate},
            )

        samples, rate = audio.decimate(signal.samples, signal.sample_rate, factor, max_duration)
        if len(samples) == 0:
            raise EmptyInput(
                self.contract.name,
                detail={
                    "input_samples": int(len(signal.samples)),
                    "decimation_factor": factor,
                    "max_duration_sec": max_duration,
                },
            )

        logger.debug(
            "Decimated %d → %d samples, %d Hz → %d Hz",
            len(signal.samples), len(samples), signal.sample_rate, rate,
        )
        return {"signal/decimated": NormalizedSignal(samples=samples, sample_rate=rate)}

    def describe(self, outputs: dict) -> dict:
        signal = outputs["signal/decimated"]
        return {
            "num_samples": int(len(signal.samples)),
            "sample_rate_hz": signal.sample_rate,
        }
