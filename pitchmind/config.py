"""
PitchMind v1 Pipeline Configuration.

One frozen PipelineConfig parameterizes every stage. Validation happens at
construction time and reports all invalid fields at once.

Sources (later wins):
    1. Field defaults
    2. JSON config file (load_config)
    3. Explicit keyword overrides (CLI flags)
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping


class ConfigError(ValueError):
    """
    Raised when configuration values are invalid.

    Attributes:
        problems: One human-readable message per invalid field
    """

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


@dataclass(frozen=True)
class PipelineConfig:
    """
    Named options of the pitch detection pipeline.

    Attributes:
        decimation_factor: Keep every Nth sample (1 = no decimation).
            No anti-aliasing filter is applied before subsampling.
        max_duration_sec: Analyze at most this many seconds after
            decimation (None = whole clip).
        search_range: Fraction of spectrum bins searched for the peak,
            counted from bin 0. 0.25 searches the lowest quarter.
        apply_window: Apply a Hann window before the transform.
        pad_to_power_of_two: Zero-pad to the next power of two; otherwise
            transform at the exact signal length.
        reference_hz: Frequency of A4 (MIDI 69).
        min_hz: Lowest frequency mapped to a note (inclusive).
        max_hz: Highest frequency mapped to a note (inclusive).
    """

    decimation_factor: int = 1
    max_duration_sec: float | None = None
    search_range: float = 1.0
    apply_window: bool = True
    pad_to_power_of_two: bool = True
    reference_hz: float = 440.0
    min_hz: float = 20.0
    max_hz: float = 4000.0

    def __post_init__(self) -> None:
        problems = self._validate()
        if problems:
            raise ConfigError(problems)

    def _validate(self) -> list[str]:
        problems: list[str] = []

        if isinstance(self.decimation_factor, bool) or not isinstance(self.decimation_factor, int):
            problems.append(f"decimation_factor must be an integer, got {self.decimation_factor!r}")
        elif self.decimation_factor < 1:
            problems.append(f"decimation_factor must be >= 1, got {self.decimation_factor}")

        if self.max_duration_sec is not None and not _positive_number(self.max_duration_sec):
            problems.append(f"max_duration_sec must be > 0 or None, got {self.max_duration_sec!r}")

        if not _is_number(self.search_range) or not 0.0 < self.search_range <= 1.0:
            problems.append(f"search_range must be in (0, 1], got {self.search_range!r}")

        for name in ("apply_window", "pad_to_power_of_two"):
            if not isinstance(getattr(self, name), bool):
                problems.append(f"{name} must be a boolean, got {getattr(self, name)!r}")

        for name in ("reference_hz", "min_hz", "max_hz"):
            if not _positive_number(getattr(self, name)):
                problems.append(f"{name} must be > 0, got {getattr(self, name)!r}")

        if (
            _positive_number(self.min_hz)
            and _positive_number(self.max_hz)
            and self.max_hz <= self.min_hz
        ):
            problems.append(f"max_hz ({self.max_hz}) must be greater than min_hz ({self.min_hz})")

        return problems

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PipelineConfig":
        """
        Build a config from a mapping of field names.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError([f"Unknown config key: {key}" for key in unknown])
        return cls(**dict(data))

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)


def load_config(path: Path) -> PipelineConfig:
    """
    Load a PipelineConfig from a JSON object file.

    Raises:
        ConfigError: If the file is not a JSON object or holds invalid values.
        OSError: If the file cannot be read.
    """
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise ConfigError([f"{path}: invalid JSON: {e}"]) from e

    if not isinstance(data, dict):
        raise ConfigError([f"{path}: expected a JSON object, got {type(data).__name__}"])

    return PipelineConfig.from_dict(data)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive_number(value: Any) -> bool:
    return _is_number(value) and value > 0
