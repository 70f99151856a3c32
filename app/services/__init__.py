"""
app/services package marker.
"""

from app.services.audit_orchestrator import (
    DailyAuditOrchestrator,
    build_daily_audit_orchestrator,
    build_ledger_store,
)

__all__ = [
    "DailyAuditOrchestrator",
    "build_daily_audit_orchestrator",
    "build_ledger_store",
]
