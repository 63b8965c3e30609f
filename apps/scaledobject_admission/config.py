import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "y")


class Settings:
    """
    Centralized admission service configuration.

    Backed by environment variables so behavior can be tuned per
    environment (dev / stage / prod) without changing code.

    Fields:
      - ADMISSION_SERVICE_NAME: service.name reported to OTEL
      - ADMISSION_LOG_LEVEL: root log level
      - ADMISSION_ENV: deployment.environment reported to OTEL
      - OTel_Endpoint: OTEL OTLP endpoint for traces
      - ADMISSION_OTEL_ENABLED: turn tracing export on/off
      - ADMISSION_AUDIT_LOG_PATH: JSONL audit file; empty disables auditing
    """

    # ------------------------------------------------------------------
    # Base service settings
    # ------------------------------------------------------------------
    ADMISSION_SERVICE_NAME: str = os.getenv("ADMISSION_SERVICE_NAME", "scaledobject-admission")
    ADMISSION_LOG_LEVEL: str = os.getenv("ADMISSION_LOG_LEVEL", "INFO")
    ADMISSION_ENV: str = os.getenv("ADMISSION_ENV", "dev")

    OTel_Endpoint: str = os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "http://otel-collector:4317",
    )

    # Master switch for OTLP export; tests and local runs turn it off.
    ADMISSION_OTEL_ENABLED: bool = _env_flag("ADMISSION_OTEL_ENABLED", "true")

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------
    ADMISSION_AUDIT_LOG_PATH: str = os.getenv("ADMISSION_AUDIT_LOG_PATH", "")

    @property
    def OTEL_ENDPOINT(self) -> str:
        return self.OTel_Endpoint

    @property
    def audit_enabled(self) -> bool:
        return bool(self.ADMISSION_AUDIT_LOG_PATH)


settings = Settings()
