# backend/modules/loyalty/services/__init__.py

from .ledger_service import LedgerService, calculate_tokens, TIER_BENEFITS
from .audit_sink import (
    AuditEvent,
    AuditSink,
    LoggingAuditSink,
    HttpAuditSink,
    build_audit_sink,
    get_audit_sink,
    shutdown_audit_sink,
)

__all__ = [
    "LedgerService",
    "calculate_tokens",
    "TIER_BENEFITS",
    "AuditEvent",
    "AuditSink",
    "LoggingAuditSink",
    "HttpAuditSink",
    "build_audit_sink",
    "get_audit_sink",
    "shutdown_audit_sink",
]
