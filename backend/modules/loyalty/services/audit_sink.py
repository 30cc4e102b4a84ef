# backend/modules/loyalty/services/audit_sink.py

"""
Best-effort audit trail for ledger mutations.

Sinks are called after the ledger transaction commits. ``try_record`` never
raises and never blocks the caller on network I/O; failed deliveries are
logged and dropped.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, Optional
import json
import logging
import threading

import httpx

from core.config import Settings, get_settings
from core.mixins import utc_now

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("loyalty.audit")


@dataclass(frozen=True)
class AuditEvent:
    event_type: str  # "earned" | "redeemed"
    customer_id: str
    amount: int
    balance_after: int
    transaction_id: str
    reference_id: Optional[str] = None
    occurred_at: datetime = field(default_factory=utc_now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["occurred_at"] = self.occurred_at.isoformat()
        return payload


class AuditSink(ABC):
    """Append-only external log of ledger mutations"""

    def try_record(self, event: AuditEvent) -> None:
        """Record ``event`` without ever raising into the caller."""
        try:
            self._record(event)
        except Exception:
            logger.exception(
                f"Audit sink {type(self).__name__} dropped event "
                f"{event.event_type} for {event.transaction_id}"
            )

    @abstractmethod
    def _record(self, event: AuditEvent) -> None:
        ...

    def close(self) -> None:
        pass


class LoggingAuditSink(AuditSink):
    """Writes one JSON line per event to the ``loyalty.audit`` logger"""

    def _record(self, event: AuditEvent) -> None:
        audit_logger.info(json.dumps(event.to_payload(), sort_keys=True))


class HttpAuditSink(AuditSink):
    """
    Posts events to an external append-only log.

    Delivery happens on a small worker pool with a short timeout. There is no
    retry: a failed post is logged at WARNING and the event is dropped. At
    most ``max_pending`` posts are queued or in flight; events beyond that
    are dropped too.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 2.0,
        max_workers: int = 2,
        max_pending: int = 100,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.client = client or httpx.Client(timeout=timeout_seconds)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="loyalty-audit"
        )
        self._slots = threading.BoundedSemaphore(max_pending)

    def _record(self, event: AuditEvent) -> None:
        if not self._slots.acquire(blocking=False):
            logger.warning(
                f"Audit queue full; dropped event {event.event_type} "
                f"for {event.transaction_id}"
            )
            return

        try:
            future = self._executor.submit(self._deliver, event)
        except Exception:
            self._slots.release()
            raise
        future.add_done_callback(lambda _: self._slots.release())

    def _deliver(self, event: AuditEvent) -> bool:
        try:
            response = self.client.post(self.url, json=event.to_payload())
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                f"Audit delivery failed for {event.transaction_id}: {str(e)}"
            )
            return False

        logger.debug(f"Audit event {event.transaction_id} delivered")
        return True

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.client.close()


def build_audit_sink(settings: Optional[Settings] = None) -> AuditSink:
    """Pick the audit sink for the current configuration."""
    settings = settings or get_settings()
    if settings.audit_http_enabled:
        logger.info(f"Ledger audit events will be posted to {settings.audit_sink_url}")
        return HttpAuditSink(
            settings.audit_sink_url,
            timeout_seconds=settings.audit_timeout_seconds,
            max_workers=settings.audit_max_workers,
            max_pending=settings.audit_max_pending,
        )
    return LoggingAuditSink()


_audit_sink: Optional[AuditSink] = None


def get_audit_sink() -> AuditSink:
    """Process-wide audit sink (FastAPI dependency)."""
    global _audit_sink
    if _audit_sink is None:
        _audit_sink = build_audit_sink()
    return _audit_sink


def shutdown_audit_sink() -> None:
    global _audit_sink
    if _audit_sink is not None:
        _audit_sink.close()
        _audit_sink = None
