"""
FastAPI routers for ScaledObject validation.

Exposes:
- POST /v1/scaledobjects/validate                 (direct, returns a report)
- GET  /v1/scaledobjects/audit                    (recent admission decisions)
- POST /validate-keda-sh-v1alpha1-scaledobject    (Kubernetes admission webhook)
"""

from __future__ import annotations

import logging
import time
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, status
from opentelemetry import trace
from prometheus_client import Counter, Histogram
from pydantic import ValidationError

from ..models.admission_models import (
    AdmissionAuditResponse,
    AdmissionResponse,
    AdmissionReview,
    AdmissionStatus,
    CheckOutcome,
    EffectiveConfigModel,
    ValidationReport,
)
from ..models.scaledobject_models import ScaledObject
from ..models.validation_models import ValidationResult
from ..runtime.validator import derive_effective_config, run_checks
from ..services.audit_logger import AuditLogger, get_audit_logger

logger = logging.getLogger("scaledobject.admission.validation")
tracer = trace.get_tracer(__name__)

router = APIRouter(prefix="/scaledobjects", tags=["validation"])
webhook_router = APIRouter(tags=["admission"])

WEBHOOK_PATH = "/validate-keda-sh-v1alpha1-scaledobject"

# ---------------------------------------------------------------------------
# Prometheus metrics
# ---------------------------------------------------------------------------

VALIDATIONS_TOTAL = Counter(
    "scaledobject_admission_validations_total",
    "ScaledObject checks executed, by check and result.",
    ["check", "result"],  # result: success | <failure kind>
)

REVIEW_LATENCY_SECONDS = Histogram(
    "scaledobject_admission_review_latency_seconds",
    "Latency of admission reviews handled by the webhook.",
    ["operation", "allowed"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1),
)


def _run_and_record(scaled_object: ScaledObject) -> List[Tuple[str, ValidationResult]]:
    results = run_checks(scaled_object.spec)
    for name, result in results:
        VALIDATIONS_TOTAL.labels(check=name, result=result.label).inc()
    return results


def _first_failure(results: List[Tuple[str, ValidationResult]]) -> Optional[ValidationResult]:
    for _, result in results:
        if not result.ok:
            return result
    return None


# ---------------------------------------------------------------------------
# POST /v1/scaledobjects/validate
# ---------------------------------------------------------------------------

@router.post(
    "/validate",
    response_model=ValidationReport,
    summary="Validate a ScaledObject and report its effective configuration.",
)
async def validate(scaled_object: ScaledObject) -> ValidationReport:
    """
    Runs every check (not only up to the first failure) and returns the
    derived min/max replicas, modifier usage and pause state.
    """
    identifier = scaled_object.generate_identifier()

    with tracer.start_as_current_span("validation.scaledobject") as span:
        span.set_attribute("scaledobject.identifier", identifier)

        results = _run_and_record(scaled_object)
        effective = derive_effective_config(scaled_object)
        valid = all(r.ok for _, r in results)

        span.set_attribute("scaledobject.valid", valid)
        logger.info("Validated %s valid=%s", identifier, valid)

        return ValidationReport(
            valid=valid,
            checks=[
                CheckOutcome(
                    check=name,
                    ok=result.ok,
                    reason=None if result.ok else result.kind.value,
                    message=result.message,
                )
                for name, result in results
            ],
            effective=EffectiveConfigModel(
                identifier=effective.identifier,
                minReplicas=effective.min_replicas,
                maxReplicas=effective.max_replicas,
                usingModifiers=effective.using_modifiers,
                hasPausedAnnotation=effective.has_paused_annotation,
                hasPausedReplicasAnnotation=effective.has_paused_replicas_annotation,
                paused=effective.paused,
            ),
        )


# ---------------------------------------------------------------------------
# GET /v1/scaledobjects/audit
# ---------------------------------------------------------------------------

@router.get(
    "/audit",
    response_model=AdmissionAuditResponse,
    summary="Most recent admission decisions from the audit log.",
)
async def read_audit(
    limit: int = Query(50, ge=1, le=1000),
    audit: Optional[AuditLogger] = Depends(get_audit_logger),
) -> AdmissionAuditResponse:
    if audit is None:
        return AdmissionAuditResponse(ok=False, error="audit disabled (ADMISSION_AUDIT_LOG_PATH is empty)")

    try:
        events = audit.read_last_events(limit=limit)
    except OSError as exc:
        logger.exception("Failed to read audit log %s", audit.log_path)
        return AdmissionAuditResponse(ok=False, log_path=audit.log_path, error=str(exc))

    return AdmissionAuditResponse(
        ok=True,
        log_path=audit.log_path,
        returned=len(events),
        events=events,
    )


# ---------------------------------------------------------------------------
# POST /validate-keda-sh-v1alpha1-scaledobject
# ---------------------------------------------------------------------------

def _review(
    uid: str,
    allowed: bool,
    code: int = status.HTTP_200_OK,
    message: Optional[str] = None,
) -> AdmissionReview:
    response_status = AdmissionStatus(code=code, message=message) if message else None
    return AdmissionReview(
        response=AdmissionResponse(uid=uid, allowed=allowed, status=response_status),
    )


@webhook_router.post(
    WEBHOOK_PATH,
    response_model=AdmissionReview,
    response_model_exclude_none=True,
    summary="Validating admission webhook for ScaledObjects.",
)
async def review_scaled_object(
    review: AdmissionReview,
    audit: Optional[AuditLogger] = Depends(get_audit_logger),
) -> AdmissionReview:
    """
    Admission outcome:
      - DELETE              -> allowed, nothing to validate
      - unparsable object   -> denied (400)
      - first failing check -> denied (403) with its message
      - otherwise           -> allowed
    """
    request = review.request
    if request is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="AdmissionReview.request is required",
        )

    start = time.time()
    operation = request.operation.upper()
    identifier = f"scaledobject.{request.namespace or ''}.{request.name or ''}".lower()

    with tracer.start_as_current_span("admission.scaledobject") as span:
        span.set_attribute("scaledobject.admission.uid", request.uid)
        span.set_attribute("scaledobject.admission.operation", operation)

        if operation == "DELETE":
            result = _review(request.uid, allowed=True)
        else:
            try:
                scaled_object = ScaledObject.model_validate(request.object or {})
            except ValidationError as exc:
                logger.warning("Rejecting unparsable ScaledObject uid=%s: %s", request.uid, exc)
                span.record_exception(exc)
                result = _review(
                    request.uid,
                    allowed=False,
                    code=status.HTTP_400_BAD_REQUEST,
                    message=f"invalid ScaledObject: {exc}",
                )
            else:
                identifier = scaled_object.generate_identifier()
                failure = _first_failure(_run_and_record(scaled_object))
                if failure is None:
                    result = _review(request.uid, allowed=True)
                else:
                    logger.info(
                        "Denied %s %s: %s (%s)",
                        operation,
                        identifier,
                        failure.message,
                        failure.kind.value,
                    )
                    result = _review(
                        request.uid,
                        allowed=False,
                        code=status.HTTP_403_FORBIDDEN,
                        message=failure.message,
                    )

        allowed = result.response.allowed
        span.set_attribute("scaledobject.identifier", identifier)
        span.set_attribute("scaledobject.admission.allowed", allowed)

        REVIEW_LATENCY_SECONDS.labels(
            operation=operation,
            allowed="true" if allowed else "false",
        ).observe(time.time() - start)

        if audit is not None:
            audit.record_decision(
                uid=request.uid,
                identifier=identifier,
                operation=operation,
                allowed=allowed,
                reason=result.response.status.message if result.response.status else None,
            )

        return result
