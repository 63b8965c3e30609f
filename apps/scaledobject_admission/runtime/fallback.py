"""
Fallback policy checks.

Fallback replaces a failing scaler's metric with a value derived from
fallback.replicas, which only makes sense for per-replica (AverageValue)
targets. cpu and memory triggers are served by the resource metrics
pipeline and never go through fallback.
"""

from __future__ import annotations

from apps.scaledobject_admission.models.scaledobject_models import (
    MetricTargetType,
    ScaledObjectSpec,
    ScaleTrigger,
)
from apps.scaledobject_admission.models.validation_models import (
    ValidationFailureKind,
    ValidationResult,
)
from apps.scaledobject_admission.runtime.modifiers import is_using_modifiers

CPU_TRIGGER_TYPE = "cpu"
MEMORY_TRIGGER_TYPE = "memory"

FALLBACK_EXEMPT_TRIGGER_TYPES = frozenset({CPU_TRIGGER_TYPE, MEMORY_TRIGGER_TYPE})


def is_fallback_eligible(trigger: ScaleTrigger) -> bool:
    if trigger.type in FALLBACK_EXEMPT_TRIGGER_TYPES:
        return False
    return trigger.effective_metric_type == MetricTargetType.AVERAGE_VALUE


def check_fallback_valid(spec: ScaledObjectSpec) -> ValidationResult:
    """
    Returns success when no fallback is configured, or when the fallback
    can be honoured by at least one AverageValue metric.
    """
    fallback = spec.fallback
    if fallback is None:
        return ValidationResult.success()

    if fallback.failureThreshold < 0 or fallback.replicas < 0:
        return ValidationResult.failure(
            ValidationFailureKind.NEGATIVE_FALLBACK_FIELD,
            f"FailureThreshold={fallback.failureThreshold} & Replicas={fallback.replicas} "
            "must both be greater than or equal to 0",
        )

    if is_using_modifiers(spec):
        # the composite metric replaces the individual triggers
        if spec.advanced.scalingModifiers.metricType == MetricTargetType.VALUE:
            return ValidationResult.failure(
                ValidationFailureKind.UNSUPPORTED_FALLBACK_METRIC_TYPE,
                "when using ScalingModifiers, ScaledObject.Spec.Advanced.ScalingModifiers.MetricType "
                "must be AverageValue to have fallback enabled",
            )
        return ValidationResult.success()

    if any(is_fallback_eligible(t) for t in spec.triggers):
        return ValidationResult.success()

    return ValidationResult.failure(
        ValidationFailureKind.NO_ELIGIBLE_FALLBACK_TRIGGER,
        "at least one trigger (that is not cpu or memory) has to have the `AverageValue` "
        "type for the fallback to be enabled",
    )
