"""
Stage 1: Ingest & Validate

Responsibilities:
    - Validate the whole AudioStream before any sample is processed
    - Resolve the SampleEncoding
    - Output: audio/encoding

Invariants:
    - Unsupported encodings fail here, never mid-stream
    - Zero raw samples is fatal (EmptyInput)
    - Incomplete trailing frames and non-finite floats are logged, not fatal
"""

import logging

import numpy as np

from pitchmind.contracts import Stage, StageContract, StageContext
from pitchmind.stages.base import EmptyInput, InvalidStream
from pitchmind.types import AudioStream


logger = logging.getLogger(__name__)


# =============================================================================
# Stage Contract (LOCKED)
# =============================================================================

CONTRACT = StageContract(
    name="ingest",
    requires=frozenset({"audio/stream"}),
    produces=frozenset({"audio/encoding"}),
    version="1.0.0",
)


class IngestStage(Stage):
    """Stage 1: Validate stream metadata and resolve its encoding."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict:
        """
        Execute ingest stage.

        Raises:
            UnsupportedEncoding: Unknown bit depth / format pair
            InvalidStream: Non-positive sample rate or channel count
            EmptyInput: No raw samples
        """
        stream: AudioStream = ctx.get("audio/stream")
        name = self.contract.name

        encoding = stream.encoding

        if stream.sample_rate <= 0:
            raise InvalidStream(
                name,
                f"Sample rate must be positive, got {stream.sample_rate}",
                detail={"sample_rate": stream.sample_rate},
            )
        if stream.channels < 1:
            raise InvalidStream(
                name,
                f"Channel count must be >= 1, got {stream.channels}",
                detail={"channels": stream.channels},
            )
        if len(stream.samples) == 0:
            raise EmptyInput(name, detail={"raw_samples": 0})

        leftover = len(stream.samples) % stream.channels
        if leftover:
            logger.warning(
                "Sample count %d is not a multiple of %d channels; "
                "dropping %d trailing sample(s)",
                len(stream.samples), stream.channels, leftover,
            )

        if stream.sample_format == "float":
            non_finite = int(np.count_nonzero(~np.isfinite(stream.samples)))
            if non_finite:
                logger.warning("Stream contains %d non-finite float sample(s)", non_finite)

        logger.debug(
            "Ingested %s stream: %d samples, %d channel(s), %d Hz",
            encoding.name, len(stream.samples), stream.channels, stream.sample_rate,
        )
        return {"audio/encoding": encoding}

    def describe(self, outputs: dict) -> dict:
        encoding = outputs["audio/encoding"]
        return {"encoding": encoding.name, "bits_per_sample": encoding.bits}
