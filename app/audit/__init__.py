"""Audit trail for writes made by the scenario service."""
from app.audit.models import AuditLog
from app.audit.services import AuditService

__all__ = ["AuditLog", "AuditService"]
