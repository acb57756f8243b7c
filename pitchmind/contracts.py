"""
PitchMind v1 Stage Contracts

Formal stage contracts, centralized validation, and the immutable context
passed between stages.

This module provides:
- StageContract: Frozen, declarative contract for a stage
- StageContext: Immutable execution context snapshot
- Stage: Abstract base class for all stages
- StageValidator: Centralized input/output validation
- ValidationError: Structured validation failure
- ROLE_TYPES: Value type expected for every role

INVARIANTS:
- Contracts are frozen and immutable
- Validation happens before stage execution
- Stages do NOT validate their own contract inputs
- Stages do NOT mutate context
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from pitchmind.config import PipelineConfig
from pitchmind.types import (
    AudioStream,
    NormalizedSignal,
    PeakEstimate,
    PitchResult,
    SampleEncoding,
    Spectrum,
)


# =============================================================================
# Roles
# =============================================================================

ROLE_TYPES: Mapping[str, type] = MappingProxyType({
    "audio/stream": AudioStream,
    "audio/encoding": SampleEncoding,
    "signal/normalized": NormalizedSignal,
    "signal/mono": NormalizedSignal,
    "signal/decimated": NormalizedSignal,
    "signal/windowed": NormalizedSignal,
    "spectrum/magnitude": Spectrum,
    "peak/frequency": PeakEstimate,
    "result/pitch": PitchResult,
})


# =============================================================================
# StageContract — Frozen, Declarative
# =============================================================================


@dataclass(frozen=True)
class StageContract:
    """
    Frozen contract declaring what a stage requires and produces.

    Attributes:
        name: Stage identifier (e.g., "normalize", "spectrum")
        requires: Set of roles required to run (e.g., {"signal/mono"})
        produces: Set of roles this stage creates (e.g., {"signal/decimated"})
        version: Semantic version for reproducibility (e.g., "1.0.0")
    """
    name: str
    requires: frozenset[str]
    produces: frozenset[str]
    version: str


# =============================================================================
# StageContext — Immutable Execution Snapshot
# =============================================================================


@dataclass(frozen=True)
class StageContext:
    """
    Immutable snapshot of execution context passed to stages.

    Attributes:
        config: Pipeline configuration for this run
        values: Read-only mapping of role → value produced so far

    Rules:
        - Constructed by pipeline, not stages
        - Each stage sees a fresh snapshot; extending returns a new context
    """
    config: PipelineConfig
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, role: str) -> Any:
        """Return the value for a role. Raises KeyError if absent."""
        return self.values[role]

    def extend(self, outputs: Mapping[str, Any]) -> "StageContext":
        """Return a new context with outputs added."""
        return StageContext(config=self.config, values={**self.values, **outputs})


# =============================================================================
# Stage — Abstract Base Class
# =============================================================================


class Stage(ABC):
    """
    Abstract base class for all pipeline stages.

    Subclasses must:
        - Define a `contract` class attribute of type StageContract
        - Implement `run(ctx)` returning a mapping of produced roles

    Subclasses may override `describe(outputs)` to report diagnostics to the
    pipeline observer.
    """

    contract: StageContract

    @abstractmethod
    def run(self, ctx: StageContext) -> dict[str, Any]:
        """
        Execute the stage.

        Args:
            ctx: Immutable execution context

        Returns:
            Mapping of role → value. Keys must match exactly the roles
            declared in contract.produces.
        """
        ...

    def describe(self, outputs: Mapping[str, Any]) -> dict[str, Any]:
        """Diagnostics for the observer. Default: none."""
        return {}


# =============================================================================
# ValidationError — Structured Validation Failure
# =============================================================================


class ValidationError(Exception):
    """
    Raised when a stage's inputs or outputs break its contract.

    Attributes:
        stage: Name of the stage that failed validation
        missing_roles: Roles required (or promised) but not available
        available_roles: Roles that were available
        type_errors: List of role/type compatibility errors
    """

    def __init__(
        self,
        stage: str,
        missing_roles: set[str],
        available_roles: set[str],
        type_errors: list[str],
    ):
        self.stage = stage
        self.missing_roles = missing_roles
        self.available_roles = available_roles
        self.type_errors = type_errors

        parts = [f"Validation failed for stage '{stage}'"]
        if missing_roles:
            parts.append(f"Missing roles: {sorted(missing_roles)}")
            parts.append(f"Available roles: {sorted(available_roles)}")
        if type_errors:
            parts.append(f"Type errors: {type_errors}")

        super().__init__("; ".join(parts))


# =============================================================================
# StageValidator — Centralized Validation
# =============================================================================


class StageValidator:
    """
    Validates that stage inputs and outputs satisfy contract requirements.

    Validation checks:
        1. All required roles exist in the context
        2. Every value has the type registered for its role in ROLE_TYPES
        3. A stage's outputs are exactly its declared roles

    Rules:
        - No side effects
        - Fail fast with structured ValidationError
    """

    def validate(self, contract: StageContract, values: Mapping[str, Any]) -> None:
        """
        Validate that available values satisfy contract requirements.

        Raises:
            ValidationError: If validation fails
        """
        available_roles = set(values)
        missing_roles = set(contract.requires - available_roles)
        type_errors = _type_errors(values)

        if missing_roles or type_errors:
            raise ValidationError(
                stage=contract.name,
                missing_roles=missing_roles,
                available_roles=available_roles,
                type_errors=type_errors,
            )

    def validate_outputs(self, contract: StageContract, outputs: Mapping[str, Any]) -> None:
        """
        Validate that a stage produced exactly its declared roles.

        Raises:
            ValidationError: If roles are missing, unexpected or mistyped
        """
        produced = set(outputs)
        missing_roles = set(contract.produces - produced)
        type_errors = _type_errors(outputs)
        type_errors.extend(
            f"Role '{role}' was not declared in contract.produces"
            for role in sorted(produced - contract.produces)
        )

        if missing_roles or type_errors:
            raise ValidationError(
                stage=contract.name,
                missing_roles=missing_roles,
                available_roles=produced,
                type_errors=type_errors,
            )


def _type_errors(values: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []
    for role in sorted(values):
        expected = ROLE_TYPES.get(role)
        if expected is None:
            errors.append(f"Role '{role}' is not a known role")
        elif not isinstance(values[role], expected):
            errors.append(
                f"Role '{role}' has type '{type(values[role]).__name__}', "
                f"expected '{expected.__name__}'"
            )
    return errors


# =============================================================================
# Pipeline Version
# =============================================================================

PIPELINE_VERSION = "1.0.0"
