"""
Audit Log model.

The only record the scenario service writes is a scenario result, so entries
here are either the first compute of a scenario ("create") or a recompute
that replaced a field of the stored result ("update").
"""
from sqlalchemy import Column, String, DateTime, Text, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from app.database import Base
from app.models.base import generate_id


class AuditLog(Base):
    """One audited write, scoped to an organization."""

    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True, default=lambda: generate_id("audit"))
    organization_id = Column(String, nullable=True, index=True)
    user_id = Column(String, nullable=True, index=True)  # None for system recomputes
    source = Column(String, nullable=False, default="api")  # "api" | "system"

    # Target
    entity_type = Column(String, nullable=False)  # "scenario_result"
    entity_id = Column(String, nullable=False)
    action = Column(String, nullable=False)  # "create" | "update"

    # Change (field_name is set for updates only)
    field_name = Column(String, nullable=True)
    old_value = Column(JSONB, nullable=True)
    new_value = Column(JSONB, nullable=True)

    extra_data = Column(JSONB, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_audit_logs_org_entity", "organization_id", "entity_type", "entity_id"),
        Index("ix_audit_logs_org_created", "organization_id", "created_at"),
    )

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type}/{self.entity_id}>"
