"""
Audit Service.

Entries are only added to the caller's session. Whoever owns the transaction
commits them together with the write they describe, so a rolled-back write
leaves no audit trail behind.
"""
from typing import Optional, Dict, Any, List, Literal, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from app.audit.models import AuditLog


EntityType = Literal["scenario_result"]
ActionType = Literal["create", "update"]
SourceType = Literal["api", "system"]


class AuditService:
    """
    Records writes made on behalf of one user within one organization.

    Usage:
        audit = AuditService(db, user_id="user_1", organization_id="org_1")
        audit.log_create("scenario_result", result.id, {"scenario_id": "sc_1"})
        await db.commit()
    """

    def __init__(
        self,
        db: AsyncSession,
        user_id: Optional[str] = None,
        organization_id: Optional[str] = None,
        source: SourceType = "api",
    ):
        self.db = db
        self.user_id = user_id
        self.organization_id = organization_id
        self.source = source

    def log(
        self,
        entity_type: EntityType,
        entity_id: str,
        action: ActionType,
        field_name: Optional[str] = None,
        old_value: Optional[Any] = None,
        new_value: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> AuditLog:
        """Add one entry to the session and return it (uncommitted)."""
        entry = AuditLog(
            organization_id=self.organization_id,
            user_id=self.user_id,
            source=self.source,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            field_name=field_name,
            old_value=old_value,
            new_value=new_value,
            extra_data=metadata,
            notes=notes,
        )
        self.db.add(entry)
        return entry

    def log_create(
        self,
        entity_type: EntityType,
        entity_id: str,
        new_value: Dict[str, Any],
        notes: Optional[str] = None,
    ) -> AuditLog:
        return self.log(entity_type, entity_id, "create", new_value=new_value, notes=notes)

    def log_update(
        self,
        entity_type: EntityType,
        entity_id: str,
        changes: Dict[str, Tuple[Any, Any]],
        notes: Optional[str] = None,
    ) -> List[AuditLog]:
        """
        One entry per changed field.

        Args:
            changes: field name -> (old_value, new_value); unchanged pairs are skipped
        """
        return [
            self.log(
                entity_type,
                entity_id,
                "update",
                field_name=field_name,
                old_value=old_value,
                new_value=new_value,
                notes=notes,
            )
            for field_name, (old_value, new_value) in changes.items()
            if old_value != new_value
        ]
