from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from reclaim_api.db.session import get_db
from reclaim_api.schemas.audit import AuditEntryRead
from reclaim_api.services import audit as audit_service

router = APIRouter(prefix="/api/audit-trail", tags=["audit"])


@router.get("", response_model=list[AuditEntryRead])
def recent_activity(
    limit: int = Query(default=audit_service.RECENT_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
) -> list[AuditEntryRead]:
    return [AuditEntryRead.model_validate(entry) for entry in audit_service.recent_activity(db, limit=limit)]


@router.get("/material/{material_id}", response_model=list[AuditEntryRead])
def material_activity(material_id: int, db: Session = Depends(get_db)) -> list[AuditEntryRead]:
    return [AuditEntryRead.model_validate(entry) for entry in audit_service.material_activity(db, material_id)]


@router.get("/user/{user_id}", response_model=list[AuditEntryRead])
def user_activity(user_id: int, db: Session = Depends(get_db)) -> list[AuditEntryRead]:
    return [AuditEntryRead.model_validate(entry) for entry in audit_service.user_activity(db, user_id)]
