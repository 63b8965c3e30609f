import pytest
from fastapi.testclient import TestClient

from apps.scaledobject_admission.app import app
from apps.scaledobject_admission.routers.validation_router import WEBHOOK_PATH
from apps.scaledobject_admission.runtime.annotations import PAUSED_ANNOTATION
from apps.scaledobject_admission.services.audit_logger import AuditLogger, get_audit_logger


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _review(obj, operation="CREATE", uid="abc-123"):
    return {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "request": {
            "uid": uid,
            "operation": operation,
            "name": "orders",
            "namespace": "shop",
            "object": obj,
        },
    }


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_metrics_exposes_validation_counter(client, manifest_factory):
    client.post("/v1/scaledobjects/validate", json=manifest_factory())
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "scaledobject_admission_validations_total" in resp.text


def test_validate_valid_object(client, manifest_factory):
    resp = client.post(
        "/v1/scaledobjects/validate",
        json=manifest_factory(annotations={PAUSED_ANNOTATION: "true"}, maxReplicaCount=20),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["valid"] is True
    assert [c["check"] for c in body["checks"]] == ["replica_bounds", "fallback"]
    assert body["effective"] == {
        "identifier": "scaledobject.shop.orders",
        "minReplicas": 1,
        "maxReplicas": 20,
        "usingModifiers": False,
        "hasPausedAnnotation": True,
        "hasPausedReplicasAnnotation": False,
        "paused": True,
    }


def test_validate_reports_every_failure(client, manifest_factory):
    resp = client.post(
        "/v1/scaledobjects/validate",
        json=manifest_factory(
            minReplicaCount=5,
            maxReplicaCount=3,
            fallback={"failureThreshold": -1, "replicas": 2},
        ),
    )
    body = resp.json()
    assert body["valid"] is False
    checks = {c["check"]: c for c in body["checks"]}
    assert checks["replica_bounds"]["reason"] == "OutOfBoundsReplicaCount"
    assert checks["replica_bounds"]["message"] == "MinReplicaCount=5 must be less than MaxReplicaCount=3"
    assert checks["fallback"]["reason"] == "NegativeFallbackField"


def test_validate_rejects_malformed_body(client):
    resp = client.post("/v1/scaledobjects/validate", json={"kind": "ScaledObject", "spec": {}})
    assert resp.status_code == 422


def test_webhook_allows_valid_object(client, manifest_factory):
    resp = client.post(WEBHOOK_PATH, json=_review(manifest_factory()))
    assert resp.status_code == 200
    body = resp.json()
    assert body["apiVersion"] == "admission.k8s.io/v1"
    assert body["kind"] == "AdmissionReview"
    assert body["response"] == {"uid": "abc-123", "allowed": True}


def test_webhook_denies_first_failure(client, manifest_factory):
    obj = manifest_factory(
        idleReplicaCount=10,
        minReplicaCount=10,
        triggers=[{"type": "cpu"}],
        fallback={"failureThreshold": 3, "replicas": 1},
    )
    body = client.post(WEBHOOK_PATH, json=_review(obj)).json()
    assert body["response"]["allowed"] is False
    assert body["response"]["status"] == {
        "code": 403,
        "message": "IdleReplicaCount=10 must be less than MinReplicaCount=10",
    }


def test_webhook_denies_fallback_without_eligible_trigger(client, manifest_factory):
    obj = manifest_factory(
        triggers=[{"type": "cpu"}, {"type": "memory"}],
        fallback={"failureThreshold": 3, "replicas": 1},
    )
    body = client.post(WEBHOOK_PATH, json=_review(obj, operation="UPDATE")).json()
    assert body["response"]["allowed"] is False
    assert "AverageValue" in body["response"]["status"]["message"]


def test_webhook_allows_delete_without_validating(client):
    body = client.post(WEBHOOK_PATH, json=_review(None, operation="DELETE")).json()
    assert body["response"]["allowed"] is True


def test_webhook_denies_unparsable_object(client):
    body = client.post(WEBHOOK_PATH, json=_review({"kind": "ScaledObject", "spec": {"triggers": "nope"}})).json()
    assert body["response"]["allowed"] is False
    assert body["response"]["status"]["code"] == 400
    assert body["response"]["status"]["message"].startswith("invalid ScaledObject")


def test_webhook_requires_request(client):
    resp = client.post(WEBHOOK_PATH, json={"apiVersion": "admission.k8s.io/v1", "kind": "AdmissionReview"})
    assert resp.status_code == 400


def test_webhook_writes_audit_events(client, manifest_factory, tmp_path):
    audit = AuditLogger(str(tmp_path / "audit" / "decisions.jsonl"))
    app.dependency_overrides[get_audit_logger] = lambda: audit

    client.post(WEBHOOK_PATH, json=_review(manifest_factory(), uid="u1"))
    client.post(WEBHOOK_PATH, json=_review(manifest_factory(minReplicaCount=5, maxReplicaCount=1), uid="u2"))

    events = audit.read_last_events()
    assert [e["uid"] for e in events] == ["u1", "u2"]
    assert events[0]["allowed"] is True
    assert events[0]["identifier"] == "scaledobject.shop.orders"
    assert events[1]["allowed"] is False
    assert events[1]["reason"] == "MinReplicaCount=5 must be less than MaxReplicaCount=1"


def test_webhook_admits_cpu_utilization_trigger(client, manifest_factory):
    obj = manifest_factory(
        triggers=[
            {"type": "cpu", "metricType": "Utilization", "metadata": {"value": "60"}},
            {"type": "kafka", "metadata": {"topic": "orders"}},
        ],
        fallback={"failureThreshold": 3, "replicas": 2},
    )
    body = client.post(WEBHOOK_PATH, json=_review(obj)).json()
    assert body["response"] == {"uid": "abc-123", "allowed": True}


def test_webhook_denies_fallback_with_only_utilization_trigger(client, manifest_factory):
    obj = manifest_factory(
        triggers=[{"type": "cpu", "metricType": "Utilization", "metadata": {"value": "60"}}],
        fallback={"failureThreshold": 3, "replicas": 2},
    )
    body = client.post(WEBHOOK_PATH, json=_review(obj)).json()
    assert body["response"]["allowed"] is False
    assert body["response"]["status"]["code"] == 403


def test_webhook_unaffected_by_unusable_audit_path(client, manifest_factory, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    audit = AuditLogger(str(blocker / "sub" / "decisions.jsonl"))
    app.dependency_overrides[get_audit_logger] = lambda: audit

    resp = client.post(WEBHOOK_PATH, json=_review(manifest_factory()))
    assert resp.status_code == 200
    assert resp.json()["response"]["allowed"] is True

    denied = client.post(WEBHOOK_PATH, json=_review(manifest_factory(minReplicaCount=5, maxReplicaCount=1)))
    assert denied.status_code == 200
    assert denied.json()["response"]["allowed"] is False


def test_audit_endpoint_disabled_by_default(client):
    body = client.get("/v1/scaledobjects/audit").json()
    assert body["ok"] is False
    assert "disabled" in body["error"]


def test_audit_endpoint_returns_recent_decisions(client, manifest_factory, tmp_path):
    audit = AuditLogger(str(tmp_path / "decisions.jsonl"))
    app.dependency_overrides[get_audit_logger] = lambda: audit

    for uid in ("u1", "u2", "u3"):
        client.post(WEBHOOK_PATH, json=_review(manifest_factory(), uid=uid))

    body = client.get("/v1/scaledobjects/audit", params={"limit": 2}).json()
    assert body["ok"] is True
    assert body["returned"] == 2
    assert [e["uid"] for e in body["events"]] == ["u2", "u3"]
    assert body["log_path"] == audit.log_path


@pytest.mark.parametrize("limit", [0, -1, 1001])
def test_audit_endpoint_rejects_out_of_range_limit(client, limit):
    resp = client.get("/v1/scaledobjects/audit", params={"limit": limit})
    assert resp.status_code == 422
