from apps.scaledobject_admission.models.scaledobject_models import ScaledObjectSpec
from apps.scaledobject_admission.models.validation_models import (
    ValidationFailureKind,
    ValidationResult,
)
from apps.scaledobject_admission.runtime.defaults import get_hpa_max_replicas


def check_replica_bounds(spec: ScaledObjectSpec) -> ValidationResult:
    """
    Check that Idle/Min/Max replica counts are consistent:
    Min must not exceed Max, and Idle (when set) must be below Min.

    Min is compared as declared (0 when undeclared), never as the HPA
    default of 1: an idle count is only judged against what the author
    actually wrote.
    """
    min_replicas = 0
    if spec.minReplicaCount is not None:
        min_replicas = spec.minReplicaCount
    max_replicas = get_hpa_max_replicas(spec)

    if min_replicas > max_replicas:
        return ValidationResult.failure(
            ValidationFailureKind.OUT_OF_BOUNDS_REPLICA_COUNT,
            f"MinReplicaCount={min_replicas} must be less than MaxReplicaCount={max_replicas}",
        )

    idle = spec.idleReplicaCount
    if idle is not None and idle >= min_replicas:
        return ValidationResult.failure(
            ValidationFailureKind.IDLE_ABOVE_OR_EQUAL_MIN,
            f"IdleReplicaCount={idle} must be less than MinReplicaCount={min_replicas}",
        )

    return ValidationResult.success()
