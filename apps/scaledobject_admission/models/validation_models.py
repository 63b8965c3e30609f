from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ValidationFailureKind(str, Enum):
    OUT_OF_BOUNDS_REPLICA_COUNT = "OutOfBoundsReplicaCount"
    IDLE_ABOVE_OR_EQUAL_MIN = "IdleAboveOrEqualMin"
    NEGATIVE_FALLBACK_FIELD = "NegativeFallbackField"
    UNSUPPORTED_FALLBACK_METRIC_TYPE = "UnsupportedFallbackMetricType"
    NO_ELIGIBLE_FALLBACK_TRIGGER = "NoEligibleFallbackTrigger"


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of one check: success, or a failure kind plus a
    human-readable message with the offending values filled in.
    """
    ok: bool
    kind: Optional[ValidationFailureKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: ValidationFailureKind, message: str) -> "ValidationResult":
        return cls(ok=False, kind=kind, message=message)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def label(self) -> str:
        """Short result label for metrics and reports."""
        return "success" if self.ok else self.kind.value
