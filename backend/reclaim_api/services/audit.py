from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from reclaim_api.models.audit import AuditEntry
from reclaim_api.models.material import Material
from reclaim_api.models.user import User
from reclaim_api.repositories import audit as audit_repo

ACTION_CREATED = "CREATED"
ACTION_UPDATED = "UPDATED"
ACTION_DELETED = "DELETED"

RECENT_LIMIT = 10
SYSTEM_USER_NAME = "system"


def record(
    db: Session,
    *,
    action: str,
    material: Material,
    user: User | None,
    details: str,
) -> AuditEntry:
    """Stage one audit entry; the caller's commit persists it."""
    entry = AuditEntry(
        action=action,
        material_id=material.id,
        material_name=material.name,
        user_id=user.id if user else None,
        user_name=user.display_name if user else SYSTEM_USER_NAME,
        details=details,
        timestamp=datetime.utcnow(),
    )
    return audit_repo.add_entry(db, entry)


def recent_activity(db: Session, limit: int = RECENT_LIMIT) -> list[AuditEntry]:
    return audit_repo.list_recent(db, limit=limit)


def material_activity(db: Session, material_id: int) -> list[AuditEntry]:
    return audit_repo.list_for_material(db, material_id)


def user_activity(db: Session, user_id: int) -> list[AuditEntry]:
    return audit_repo.list_for_user(db, user_id)
