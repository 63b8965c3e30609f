from apps.scaledobject_admission.models.scaledobject_models import ScaledObjectSpec

DEFAULT_HPA_MIN_REPLICAS = 1
DEFAULT_HPA_MAX_REPLICAS = 100


def get_hpa_min_replicas(spec: ScaledObjectSpec) -> int:
    """
    MinReplicas handed to the HPA: the declared value when it is > 0,
    otherwise DEFAULT_HPA_MIN_REPLICAS.
    """
    if spec.minReplicaCount is not None and spec.minReplicaCount > 0:
        return spec.minReplicaCount
    return DEFAULT_HPA_MIN_REPLICAS


def get_hpa_max_replicas(spec: ScaledObjectSpec) -> int:
    """
    MaxReplicas handed to the HPA: the declared value, otherwise
    DEFAULT_HPA_MAX_REPLICAS.
    """
    if spec.maxReplicaCount is not None:
        return spec.maxReplicaCount
    return DEFAULT_HPA_MAX_REPLICAS
