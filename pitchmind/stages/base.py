"""
PitchMind v1 Stage Base Utilities.

Responsibilities:
- StageFailure exception hierarchy for pipeline control flow
- Error object builder per contract
- StageEvent records handed to the pipeline observer

Invariants:
- Every fatal error carries the failing stage and the offending values
- Errors are never retried; a run either completes or fails
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


def build_error(
    code: str,
    message: str,
    stage: str,
    detail: dict | None = None,
) -> dict:
    """
    Build structured error object.

    Args:
        code: Error code (e.g., "UNSUPPORTED_ENCODING")
        message: Human-readable error message
        stage: Stage name where error occurred
        detail: Optional additional details

    Returns:
        Structured error dictionary.
    """
    error: dict = {
        "code": code,
        "message": message,
        "stage": stage,
    }
    if detail is not None:
        error["detail"] = detail
    return error


class StageFailure(Exception):
    """
    Raised when a stage fails.

    The orchestrator emits the failing StageEvent and re-raises, so callers
    always see the typed subclass.
    """

    def __init__(self, stage: str, errors: list[dict]):
        self.stage = stage
        self.errors = errors
        messages = "; ".join(e["message"] for e in errors)
        super().__init__(f"Stage '{stage}' failed: {messages}")


class UnsupportedEncoding(StageFailure):
    """Bit depth / sample format pair outside {int16, int24, int32, float32}."""

    code = "UNSUPPORTED_ENCODING"

    def __init__(self, bits: int | None, sample_format: str, stage: str = "ingest"):
        self.bits = bits
        self.sample_format = sample_format
        described = sample_format if bits is None else f"{bits}-bit {sample_format}"
        error = build_error(
            code=self.code,
            message=f"Unsupported encoding: {described}",
            stage=stage,
            detail={"bits_per_sample": bits, "sample_format": sample_format},
        )
        super().__init__(stage, [error])


class EmptyInput(StageFailure):
    """No samples left to analyze."""

    code = "EMPTY_INPUT"

    def __init__(self, stage: str, detail: dict | None = None):
        error = build_error(
            code=self.code,
            message="No samples to analyze",
            stage=stage,
            detail=detail,
        )
        super().__init__(stage, [error])


class InvalidStream(StageFailure):
    """Stream metadata that cannot describe real audio."""

    code = "INVALID_STREAM"

    def __init__(self, stage: str, message: str, detail: dict | None = None):
        error = build_error(
            code=self.code,
            message=message,
            stage=stage,
            detail=detail,
        )
        super().__init__(stage, [error])


# =============================================================================
# Stage Events (observer hook)
# =============================================================================


@dataclass(frozen=True)
class StageEvent:
    """
    Passive record of one stage execution.

    Attributes:
        stage: Stage name
        version: Stage contract version
        started_at: ISO-8601 timestamp
        completed_at: ISO-8601 timestamp
        success: Whether the stage produced its outputs
        metrics: Stage diagnostics (lengths, rates, bins); read-only
        errors: Structured error dicts, empty on success
    """

    stage: str
    version: str
    started_at: str
    completed_at: str
    success: bool
    metrics: Mapping[str, Any] = field(default_factory=dict)
    errors: tuple[dict, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "stage": self.stage,
            "version": self.version,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "success": self.success,
            "metrics": dict(self.metrics),
            "errors": list(self.errors),
        }
