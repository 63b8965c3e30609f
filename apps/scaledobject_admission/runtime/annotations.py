"""
Pause-state resolution from ScaledObject annotations.

Annotations are passed in explicitly as a mapping; nothing here reads
from a shared object.

Keys:
  - autoscaling.keda.sh/paused           boolean string, pause intent
  - autoscaling.keda.sh/paused-replicas  presence only, pause at a replica count

The ownership/excluded-labels keys are consumed by the reconciler and
only listed here so every known key lives in one place.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from apps.scaledobject_admission.models.scaledobject_models import ScaledObjectStatus

logger = logging.getLogger("scaledobject.admission.annotations")

PAUSED_ANNOTATION = "autoscaling.keda.sh/paused"
PAUSED_REPLICAS_ANNOTATION = "autoscaling.keda.sh/paused-replicas"

SCALED_OBJECT_OWNER_ANNOTATION = "scaledobject.keda.sh/name"
TRANSFER_HPA_OWNERSHIP_ANNOTATION = "scaledobject.keda.sh/transfer-hpa-ownership"
EXCLUDED_LABELS_ANNOTATION = "scaledobject.keda.sh/hpa-excluded-labels"
VALIDATIONS_HPA_OWNERSHIP_ANNOTATION = "validations.keda.sh/hpa-ownership"

# Spellings accepted as booleans by the Kubernetes tooling (Go strconv.ParseBool)
_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> Optional[bool]:
    """Returns the parsed boolean, or None when value is not a boolean."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


def has_paused_replicas_annotation(annotations: Mapping[str, str]) -> bool:
    return PAUSED_REPLICAS_ANNOTATION in annotations


def has_paused_annotation(annotations: Mapping[str, str]) -> bool:
    """True if either the paused or the paused-replicas annotation is present."""
    return PAUSED_ANNOTATION in annotations or PAUSED_REPLICAS_ANNOTATION in annotations


def need_to_be_paused_by_annotation(
    annotations: Mapping[str, str],
    status: Optional[ScaledObjectStatus],
) -> bool:
    """
    Resolve whether the ScaledObject should be paused.

    Order:
      1. paused-replicas present -> paused iff status.pausedReplicaCount is set
         (the annotation value itself is not looked at)
      2. paused absent -> not paused
      3. paused value parsed as a boolean; anything unparsable pauses
    """
    if PAUSED_REPLICAS_ANNOTATION in annotations:
        return status is not None and status.pausedReplicaCount is not None

    raw = annotations.get(PAUSED_ANNOTATION)
    if raw is None:
        return False

    should_pause = parse_bool(raw)
    if should_pause is None:
        logger.debug(
            "Annotation %s=%r is not a boolean, treating as paused",
            PAUSED_ANNOTATION,
            raw,
        )
        return True
    return should_pause
