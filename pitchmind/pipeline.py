"""
PitchMind v1 Pipeline Orchestrator

PIPELINE STAGES (FIXED ORDER):

    1. ingest     → pitchmind.stages.ingest
    2. normalize  → pitchmind.stages.normalize
    3. downmix    → pitchmind.stages.downmix
    4. decimate   → pitchmind.stages.decimate
    5. window     → pitchmind.stages.window
    6. spectrum   → pitchmind.stages.spectrum
    7. peak       → pitchmind.stages.peak
    8. note       → pitchmind.stages.note

INVARIANTS:
    - Stages execute in order 1 → 8
    - Stages never call each other (only orchestrator sequences)
    - Inputs are validated against each contract before the stage runs
    - Outputs must match exactly the roles the contract produces
    - Pipeline stops on first stage failure; no partial results
    - Same input + same config = identical output
"""

import logging
from pathlib import Path
from typing import Callable

from pitchmind import audio
from pitchmind.config import PipelineConfig
from pitchmind.contracts import Stage, StageContext, StageValidator
from pitchmind.stages.base import StageEvent, StageFailure
from pitchmind.stages.decimate import DecimateStage
from pitchmind.stages.downmix import DownmixStage
from pitchmind.stages.ingest import IngestStage
from pitchmind.stages.normalize import NormalizeStage
from pitchmind.stages.note import NoteStage
from pitchmind.stages.peak import PeakStage
from pitchmind.stages.spectrum import SpectrumStage
from pitchmind.stages.window import WindowStage
from pitchmind.types import AudioStream, PitchResult
from pitchmind.utils import now_iso


logger = logging.getLogger(__name__)

Observer = Callable[[StageEvent], None]

# FIXED — DO NOT MODIFY ORDER
STAGE_ORDER: tuple[Stage, ...] = (
    IngestStage(),
    NormalizeStage(),
    DownmixStage(),
    DecimateStage(),
    WindowStage(),
    SpectrumStage(),
    PeakStage(),
    NoteStage(),
)

STAGE_NAMES = [stage.contract.name for stage in STAGE_ORDER]


def run_pipeline(
    stream: AudioStream,
    config: PipelineConfig | None = None,
    observer: Observer | None = None,
) -> PitchResult:
    """
    Execute all stages in order on one decoded stream.

    Args:
        stream: Decoded audio
        config: Pipeline options (default: PipelineConfig())
        observer: Called with one StageEvent per executed stage, including
            the failing one

    Returns:
        PitchResult of the note stage.

    Raises:
        StageFailure: Any typed stage error (UnsupportedEncoding, EmptyInput,
            InvalidStream)
        ValidationError: A stage's inputs or outputs broke its contract
    """
    config = config or PipelineConfig()
    validator = StageValidator()
    ctx = StageContext(config=config, values={"audio/stream": stream})

    for stage in STAGE_ORDER:
        contract = stage.contract
        validator.validate(contract, ctx.values)

        started_at = now_iso()
        try:
            outputs = stage.run(ctx)
        except StageFailure as e:
            logger.info("Stage '%s' failed: %s", contract.name, e)
            _emit(observer, StageEvent(
                stage=contract.name,
                version=contract.version,
                started_at=started_at,
                completed_at=now_iso(),
                success=False,
                errors=tuple(e.errors),
            ))
            raise

        validator.validate_outputs(contract, outputs)
        metrics = stage.describe(outputs)
        logger.debug("Stage '%s' completed: %s", contract.name, metrics)
        _emit(observer, StageEvent(
            stage=contract.name,
            version=contract.version,
            started_at=started_at,
            completed_at=now_iso(),
            success=True,
            metrics=metrics,
        ))

        ctx = ctx.extend(outputs)

    result: PitchResult = ctx.get("result/pitch")
    logger.info(
        "Dominant frequency %.2f Hz → %s",
        result.frequency_hz,
        result.note.label if result.note else "out of range",
    )
    return result


def detect_pitch(
    path: Path,
    config: PipelineConfig | None = None,
    observer: Observer | None = None,
) -> PitchResult:
    """Decode a WAV file and run the pipeline on it."""
    stream = audio.read_wav(path)
    logger.info(
        "Decoded %s: %d-bit %s, %d channel(s), %d Hz, %.3f s",
        path, stream.bits_per_sample, stream.sample_format,
        stream.channels, stream.sample_rate, stream.duration_sec,
    )
    return run_pipeline(stream, config=config, observer=observer)


def _emit(observer: Observer | None, event: StageEvent) -> None:
    if observer is not None:
        observer(event)
