"""
Pydantic models for the ScaledObject resource.

These models are used across:
  - /v1/scaledobjects/validate (direct validation)
  - /validate-keda-sh-v1alpha1-scaledobject (admission webhook)
  - tools/validate_manifest.py (offline manifest checks)

Field names follow the resource's JSON (camelCase) so raw manifests and
AdmissionReview objects can be parsed without an alias layer.

Models are frozen: a parsed ScaledObject is a read-only snapshot.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


COMPOSITE_METRIC_NAME = "composite-metric"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class MetricTargetType(str, Enum):
    VALUE = "Value"
    AVERAGE_VALUE = "AverageValue"
    # cpu/memory triggers only; never valid for scalingModifiers
    UTILIZATION = "Utilization"


class FallbackBehavior(str, Enum):
    STATIC = "static"
    CURRENT_REPLICAS = "currentReplicas"
    CURRENT_REPLICAS_IF_HIGHER = "currentReplicasIfHigher"
    CURRENT_REPLICAS_IF_LOWER = "currentReplicasIfLower"


class HealthStatusType(str, Enum):
    HAPPY = "Happy"
    FAILING = "Failing"


class ConditionType(str, Enum):
    READY = "Ready"
    ACTIVE = "Active"
    FALLBACK = "Fallback"
    PAUSED = "Paused"


def _empty_metric_type_as_unset(value: Any) -> Any:
    # metricType: "" is how an unset value arrives from serialized manifests
    if value == "":
        return None
    return value


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Spec
# ---------------------------------------------------------------------------

class ScaleTarget(_Snapshot):
    name: str = Field(..., description="Name of the workload to scale")
    apiVersion: Optional[str] = None
    kind: Optional[str] = None
    envSourceContainerName: Optional[str] = None


class AuthenticationRef(_Snapshot):
    name: str
    kind: Optional[str] = None


class ScaleTrigger(_Snapshot):
    """
    One scaling trigger (a named metric source, e.g. kafka lag or cpu).
    """
    type: str = Field(..., description="Scaler type tag, e.g. kafka, cpu, memory")
    name: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    authenticationRef: Optional[AuthenticationRef] = None
    useCachedMetrics: bool = False
    metricType: Optional[MetricTargetType] = None

    normalize_metric_type = field_validator("metricType", mode="before")(
        _empty_metric_type_as_unset
    )

    @property
    def effective_metric_type(self) -> MetricTargetType:
        return self.metricType or MetricTargetType.AVERAGE_VALUE


class ScalingModifiers(_Snapshot):
    """
    Composite-metric scaling: several triggers folded into one metric
    through `formula`.
    """
    formula: str = ""
    target: str = ""
    activationTarget: str = ""
    metricType: Optional[MetricTargetType] = None

    normalize_metric_type = field_validator("metricType", mode="before")(
        _empty_metric_type_as_unset
    )

    @field_validator("metricType")
    @classmethod
    def composite_metric_type(cls, value: Optional[MetricTargetType]) -> Optional[MetricTargetType]:
        if value is MetricTargetType.UTILIZATION:
            raise ValueError("scalingModifiers.metricType must be AverageValue or Value")
        return value

    @property
    def is_configured(self) -> bool:
        return bool(
            self.formula
            or self.target
            or self.activationTarget
            or self.metricType is not None
        )


class HorizontalPodAutoscalerConfig(_Snapshot):
    # behavior is handed to the HPA untouched
    behavior: Optional[Dict[str, Any]] = None
    name: Optional[str] = None


class AdvancedConfig(_Snapshot):
    horizontalPodAutoscalerConfig: Optional[HorizontalPodAutoscalerConfig] = None
    restoreToOriginalReplicaCount: bool = False
    scalingModifiers: ScalingModifiers = Field(default_factory=ScalingModifiers)


class Fallback(_Snapshot):
    """
    Replica policy applied when a scaler keeps failing.

    The numbers are left unconstrained so negative values reach the
    fallback check, which reports them with the offending numbers.
    """
    failureThreshold: int
    replicas: int
    behavior: FallbackBehavior = FallbackBehavior.STATIC


class ScaledObjectSpec(_Snapshot):
    scaleTargetRef: ScaleTarget
    pollingInterval: Optional[int] = None
    initialCooldownPeriod: Optional[int] = None
    cooldownPeriod: Optional[int] = None

    # None means "not declared", which is not the same as 0
    idleReplicaCount: Optional[int] = None
    minReplicaCount: Optional[int] = None
    maxReplicaCount: Optional[int] = None

    advanced: Optional[AdvancedConfig] = None
    triggers: List[ScaleTrigger] = Field(default_factory=list)
    fallback: Optional[Fallback] = None


# ---------------------------------------------------------------------------
# Status (owned by the reconciler; read here, never written)
# ---------------------------------------------------------------------------

class HealthStatus(_Snapshot):
    numberOfFailures: Optional[int] = None
    status: Optional[HealthStatusType] = None


class Condition(_Snapshot):
    type: ConditionType
    status: str = "Unknown"
    reason: Optional[str] = None
    message: Optional[str] = None


class GroupVersionKindResource(_Snapshot):
    group: str = ""
    version: str = ""
    kind: str = ""
    resource: str = ""


class ScaledObjectStatus(_Snapshot):
    scaleTargetKind: Optional[str] = None
    scaleTargetGVKR: Optional[GroupVersionKindResource] = None
    originalReplicaCount: Optional[int] = None
    lastActiveTime: Optional[datetime] = None
    externalMetricNames: List[str] = Field(default_factory=list)
    resourceMetricNames: List[str] = Field(default_factory=list)
    compositeScalerName: Optional[str] = None
    conditions: List[Condition] = Field(default_factory=list)
    health: Dict[str, HealthStatus] = Field(default_factory=dict)
    pausedReplicaCount: Optional[int] = None
    hpaName: Optional[str] = None
    triggersTypes: Optional[str] = None
    authenticationsTypes: Optional[str] = None


# ---------------------------------------------------------------------------
# Resource
# ---------------------------------------------------------------------------

class ObjectMeta(_Snapshot):
    name: str = ""
    namespace: str = ""
    annotations: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)


class ScaledObject(_Snapshot):
    apiVersion: str = "keda.sh/v1alpha1"
    kind: str = "ScaledObject"
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: ScaledObjectSpec
    status: ScaledObjectStatus = Field(default_factory=ScaledObjectStatus)

    @property
    def annotations(self) -> Mapping[str, str]:
        return self.metadata.annotations

    def generate_identifier(self) -> str:
        """Identifier in the form "scaledobject.<namespace>.<name>"."""
        return f"ScaledObject.{self.metadata.namespace}.{self.metadata.name}".lower()
