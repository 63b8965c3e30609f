"""
Pydantic models for the Kubernetes admission webhook (admission.k8s.io/v1).

Only the fields the ScaledObject webhook reads or writes are modelled;
everything else in the AdmissionReview is ignored on input.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AdmissionRequest(BaseModel):
    uid: str
    operation: str = Field(..., description="CREATE | UPDATE | DELETE | CONNECT")
    name: Optional[str] = None
    namespace: Optional[str] = None
    # Raw object; parsed into a ScaledObject by the webhook so parse
    # errors become a denied review instead of a 422.
    object: Optional[Dict[str, Any]] = None
    oldObject: Optional[Dict[str, Any]] = None


class AdmissionStatus(BaseModel):
    code: int
    message: str


class AdmissionResponse(BaseModel):
    uid: str
    allowed: bool
    status: Optional[AdmissionStatus] = None
    warnings: Optional[List[str]] = None


class AdmissionReview(BaseModel):
    apiVersion: str = "admission.k8s.io/v1"
    kind: str = "AdmissionReview"
    request: Optional[AdmissionRequest] = None
    response: Optional[AdmissionResponse] = None


# ---------------------------------------------------------------------------
# Direct validation API
# ---------------------------------------------------------------------------

class CheckOutcome(BaseModel):
    check: str
    ok: bool
    reason: Optional[str] = None
    message: Optional[str] = None


class EffectiveConfigModel(BaseModel):
    identifier: str
    minReplicas: int
    maxReplicas: int
    usingModifiers: bool
    hasPausedAnnotation: bool
    hasPausedReplicasAnnotation: bool
    paused: bool


class ValidationReport(BaseModel):
    """
    Response for POST /v1/scaledobjects/validate
    """
    valid: bool
    checks: List[CheckOutcome] = Field(default_factory=list)
    effective: EffectiveConfigModel


# ---------------------------------------------------------------------------
# Audit log read models
# ---------------------------------------------------------------------------

class AdmissionAuditResponse(BaseModel):
    """
    Response for GET /v1/scaledobjects/audit
    """
    ok: bool
    log_path: Optional[str] = None
    returned: int = 0
    events: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
