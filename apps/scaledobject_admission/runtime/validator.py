"""
Runs every ScaledObject check against one snapshot and derives the
effective configuration the reconciler would apply.

Checks are independent; CHECKS order only decides which failure is
reported first by validate_scaled_object().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from apps.scaledobject_admission.models.scaledobject_models import (
    ScaledObject,
    ScaledObjectSpec,
)
from apps.scaledobject_admission.models.validation_models import ValidationResult
from apps.scaledobject_admission.runtime.annotations import (
    has_paused_annotation,
    has_paused_replicas_annotation,
    need_to_be_paused_by_annotation,
)
from apps.scaledobject_admission.runtime.defaults import (
    get_hpa_max_replicas,
    get_hpa_min_replicas,
)
from apps.scaledobject_admission.runtime.fallback import check_fallback_valid
from apps.scaledobject_admission.runtime.modifiers import is_using_modifiers
from apps.scaledobject_admission.runtime.replica_bounds import check_replica_bounds

Check = Callable[[ScaledObjectSpec], ValidationResult]

CHECKS: Tuple[Tuple[str, Check], ...] = (
    ("replica_bounds", check_replica_bounds),
    ("fallback", check_fallback_valid),
)


@dataclass(frozen=True)
class EffectiveConfig:
    identifier: str
    min_replicas: int
    max_replicas: int
    using_modifiers: bool
    has_paused_annotation: bool
    has_paused_replicas_annotation: bool
    paused: bool


def run_checks(spec: ScaledObjectSpec) -> List[Tuple[str, ValidationResult]]:
    return [(name, check(spec)) for name, check in CHECKS]


def validate_scaled_object(spec: ScaledObjectSpec) -> ValidationResult:
    """First failing check in CHECKS order, or success."""
    for _, check in CHECKS:
        result = check(spec)
        if not result.ok:
            return result
    return ValidationResult.success()


def derive_effective_config(scaled_object: ScaledObject) -> EffectiveConfig:
    spec = scaled_object.spec
    annotations = scaled_object.annotations
    return EffectiveConfig(
        identifier=scaled_object.generate_identifier(),
        min_replicas=get_hpa_min_replicas(spec),
        max_replicas=get_hpa_max_replicas(spec),
        using_modifiers=is_using_modifiers(spec),
        has_paused_annotation=has_paused_annotation(annotations),
        has_paused_replicas_annotation=has_paused_replicas_annotation(annotations),
        paused=need_to_be_paused_by_annotation(annotations, scaled_object.status),
    )
