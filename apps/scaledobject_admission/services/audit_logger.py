from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from apps.scaledobject_admission.config import settings

logger = logging.getLogger("scaledobject.admission.audit")


class AuditLogger:
    """
    Append-only JSONL audit of admission decisions, one JSON per line.

    Construction touches no filesystem; the parent directory is created
    on the first write.
    """

    def __init__(self, log_path: str):
        self.log_path = log_path

    def write_event(self, event: Dict[str, Any]) -> None:
        parent = os.path.dirname(self.log_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")

    def record_decision(
        self,
        *,
        identifier: str,
        operation: str,
        allowed: bool,
        reason: Optional[str] = None,
        uid: Optional[str] = None,
    ) -> None:
        """
        Audit one admission decision. A failed write is logged and
        swallowed: auditing never changes the admission outcome.
        """
        event = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "uid": uid,
            "identifier": identifier,
            "operation": operation,
            "allowed": allowed,
            "reason": reason,
        }
        try:
            self.write_event(event)
        except OSError:
            logger.exception("Failed to write audit event to %s", self.log_path)

    def read_last_events(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Most recent `limit` events; unparsable lines are skipped."""
        if limit <= 0 or not os.path.exists(self.log_path):
            return []

        with open(self.log_path, "r", encoding="utf-8") as f:
            lines = f.readlines()

        events: List[Dict[str, Any]] = []
        for line in lines[-limit:]:
            line = line.strip()
            if not line:
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning("Skipping malformed audit line in %s", self.log_path)
                continue

        return events


# Built once at import; None when auditing is off.
_audit_logger: Optional[AuditLogger] = (
    AuditLogger(settings.ADMISSION_AUDIT_LOG_PATH) if settings.audit_enabled else None
)


def get_audit_logger() -> Optional[AuditLogger]:
    """Shared AuditLogger for the configured path, or None when auditing is off."""
    return _audit_logger
