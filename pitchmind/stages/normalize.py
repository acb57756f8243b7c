"""
Stage 2: Sample Normalizer

Raw sample words → float32 in [-1, 1], still interleaved.

    INT16   raw / 2^15
    INT24   (raw >> 8) / 2^23   (24-bit word left-justified in int32)
    INT32   raw / 2^31
    FLOAT32 unchanged
"""

import logging

from pitchmind import audio
from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.types import NormalizedSignal


logger = logging.getLogger(__name__)

CONTRACT = StageContract(
    name="normalize",
    requires=frozenset({"audio/stream", "audio/encoding"}),
    produces=frozenset({"signal/normalized"}),
    version="1.0.0",
)


class NormalizeStage(Stage):
    """Stage 2: Scale raw words to the canonical float range."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        stream = ctx.get("audio/stream")
        encoding = ctx.get("audio/encoding")

        samples = audio.normalize_samples(stream.samples, encoding)
        logger.debug("Normalized %d %s samples", len(samples), encoding.name)

        return {
            "signal/normalized": NormalizedSignal(
                samples=samples,
                sample_rate=stream.sample_rate,
                channels=stream.channels,
            )
        }

    def describe(self, outputs: dict) -> dict:
        samples = outputs["signal/normalized"].samples
        return {"num_samples": int(len(samples))}
