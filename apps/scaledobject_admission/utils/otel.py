"""
OpenTelemetry setup for the ScaledObject admission service.

- Configures OTLP exporter (gRPC) to collector.
- Instruments FastAPI + logging.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from apps.scaledobject_admission.config import settings

logger = logging.getLogger("scaledobject.admission.otel")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging() -> None:
    logging.basicConfig(level=settings.ADMISSION_LOG_LEVEL, format=LOG_FORMAT)


def setup_otel(app: FastAPI) -> None:
    """
    Configure OpenTelemetry for the admission service.

    Export is skipped entirely when ADMISSION_OTEL_ENABLED is false;
    logging is configured either way.
    """
    if not settings.ADMISSION_OTEL_ENABLED:
        setup_logging()
        logger.info("OTEL export disabled (ADMISSION_OTEL_ENABLED=false)")
        return

    # 1) TracerProvider with resource
    resource = Resource.create(
        {
            "service.name": settings.ADMISSION_SERVICE_NAME,
            "deployment.environment": settings.ADMISSION_ENV,
            "service.version": "0.1.0",
            "scaledobject.component": "admission",
        }
    )

    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)

    # 2) OTLP gRPC exporter
    span_exporter = OTLPSpanExporter(
        endpoint=settings.OTEL_ENDPOINT,
        insecure=True,
    )
    provider.add_span_processor(BatchSpanProcessor(span_exporter))

    # 3) Instrument FastAPI and logging
    FastAPIInstrumentor().instrument_app(app)

    LoggingInstrumentor().instrument(
        set_logging_format=True,
    )

    # 4) Root logging level
    setup_logging()
    logger.info("OTEL configured, exporting to %s", settings.OTEL_ENDPOINT)
