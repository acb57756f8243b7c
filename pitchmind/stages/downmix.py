"""
Stage 3: Channel Reducer

Interleaved C-channel signal → mono by per-frame mean. C = 1 is identity;
an incomplete trailing frame is dropped.
"""

import logging

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.types import NormalizedSignal


logger = logging.getLogger(__name__)

CONTRACT = StageContract(
    name="downmix",
    requires=frozenset({"signal/normalized"}),
    produces=frozenset({"signal/mono"}),
    version="1.0.0",
)


class DownmixStage(Stage):
    """Stage 3: Average channels to mono."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        signal = ctx.get("signal/normalized")

        mono = audio.downmix(signal.samples, signal.channels)
        if signal.channels > 1:
            logger.debug("Downmixed %d channels to %d mono samples", signal.channels, len(mono))

        return {"signal/mono": NormalizedSignal(samples=mono, sample_rate=signal.sample_rate)}

    def describe(self, outputs: dict) -> dict:
        return {"num_samples": int(len(outputs["signal/mono"].samples))}
