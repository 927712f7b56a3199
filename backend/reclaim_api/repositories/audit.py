from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from reclaim_api.models.audit import AuditEntry


def add_entry(db: Session, entry: AuditEntry) -> AuditEntry:
    db.add(entry)
    return entry


def list_recent(db: Session, limit: int = 10) -> list[AuditEntry]:
    stmt = select(AuditEntry).order_by(AuditEntry.timestamp.desc(), AuditEntry.id.desc()).limit(limit)
    return list(db.scalars(stmt).all())


def list_for_material(db: Session, material_id: int) -> list[AuditEntry]:
    stmt = (
        select(AuditEntry)
        .where(AuditEntry.material_id == material_id)
        .order_by(AuditEntry.timestamp.desc(), AuditEntry.id.desc())
    )
    return list(db.scalars(stmt).all())


def list_for_user(db: Session, user_id: int) -> list[AuditEntry]:
    stmt = (
        select(AuditEntry)
        .where(AuditEntry.user_id == user_id)
        .order_by(AuditEntry.timestamp.desc(), AuditEntry.id.desc())
    )
    return list(db.scalars(stmt).all())
