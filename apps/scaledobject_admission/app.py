# apps/scaledobject_admission/app.py

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

# OTEL setup
from apps.scaledobject_admission.utils.otel import setup_otel

# Routers (absolute imports)
from apps.scaledobject_admission.routers.metrics_router import router as metrics_router
from apps.scaledobject_admission.routers.validation_router import (
    router as validation_router,
    webhook_router,
)


app = FastAPI(
    title="ScaledObject Admission",
    description="Validates ScaledObject autoscaling policies before they are persisted",
    version="0.1.0",
)

# ------------------------------------------------------------------
# OpenTelemetry
# ------------------------------------------------------------------
setup_otel(app)

# ------------------------------------------------------------------
# Prometheus Metrics
# ------------------------------------------------------------------
# Instrument HTTP request metrics, latency, etc.
Instrumentator().instrument(app)

# Expose our explicit /metrics endpoint
app.include_router(metrics_router)


# ------------------------------------------------------------------
# Business Routers
# ------------------------------------------------------------------
app.include_router(validation_router, prefix="/v1")
app.include_router(webhook_router)


@app.get("/healthz")
def health_check():
    return {"status": "ok", "service": "scaledobject-admission"}
