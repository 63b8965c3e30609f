import os

# Must be set before apps.scaledobject_admission.config is imported.
os.environ.setdefault("ADMISSION_OTEL_ENABLED", "false")
os.environ.setdefault("ADMISSION_AUDIT_LOG_PATH", "")

from typing import Any, Dict, List, Optional

import pytest

from apps.scaledobject_admission.models.scaledobject_models import ScaledObjectSpec


def make_spec(
    triggers: Optional[List[Dict[str, Any]]] = None,
    **fields: Any,
) -> ScaledObjectSpec:
    data: Dict[str, Any] = {
        "scaleTargetRef": {"name": "orders-worker"},
        "triggers": triggers if triggers is not None else [{"type": "kafka"}],
    }
    data.update(fields)
    return ScaledObjectSpec.model_validate(data)


def make_manifest(
    name: str = "orders",
    namespace: str = "shop",
    annotations: Optional[Dict[str, str]] = None,
    status: Optional[Dict[str, Any]] = None,
    **spec_fields: Any,
) -> Dict[str, Any]:
    spec: Dict[str, Any] = {
        "scaleTargetRef": {"name": "orders-worker"},
        "triggers": [{"type": "kafka", "metadata": {"topic": "orders"}}],
    }
    spec.update(spec_fields)
    manifest: Dict[str, Any] = {
        "apiVersion": "keda.sh/v1alpha1",
        "kind": "ScaledObject",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "annotations": annotations or {},
        },
        "spec": spec,
    }
    if status is not None:
        manifest["status"] = status
    return manifest


@pytest.fixture
def spec_factory():
    return make_spec


@pytest.fixture
def manifest_factory():
    return make_manifest
