from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Iterable

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from reclaim_api.models.material import Material, MaterialPicture
from reclaim_api.models.user import User
from reclaim_api.repositories import materials as materials_repo
from reclaim_api.schemas.material import (
    ATTRIBUTE_COLUMNS,
    COMMON_REQUIRED,
    MaterialPayload,
    attribute_columns,
    collect_field_errors,
    normalize_material_type,
)
from reclaim_api.services import audit as audit_service
from reclaim_api.services.errors import InvalidMaterialError, MaterialNotFoundError, PictureNotFoundError

logger = logging.getLogger("reclaim_api.services.materials")

RECENT_ADDITIONS_DAYS = 30
COMMON_COLUMNS = COMMON_REQUIRED + ("notes",)


@dataclass(frozen=True)
class PictureFile:
    file_name: str
    content: bytes
    content_type: str = "application/octet-stream"


def material_values(material: Material) -> dict[str, Any]:
    return {name: getattr(material, name) for name in COMMON_COLUMNS + ATTRIBUTE_COLUMNS}


def _apply_values(material: Material, data: dict[str, Any]) -> None:
    """Copy the common fields and the active type's attributes onto the row.

    Attributes that do not belong to the material type are cleared so a type
    change never leaves stale values behind.
    """
    for name in COMMON_COLUMNS:
        setattr(material, name, data.get(name))
    active = set(attribute_columns(data.get("material_type")))
    for name in ATTRIBUTE_COLUMNS:
        setattr(material, name, data.get(name) if name in active else None)


def _validated(data: dict[str, Any]) -> dict[str, Any]:
    errors = collect_field_errors(data)
    if errors:
        raise InvalidMaterialError(errors)
    return data


def get_material(db: Session, material_id: int) -> Material:
    material = materials_repo.get_material(db, material_id)
    if not material:
        raise MaterialNotFoundError(material_id)
    return material


def search_materials(
    db: Session,
    *,
    category: str | None = None,
    material_type: str | None = None,
    condition: str | None = None,
    query: str | None = None,
    page: int = 0,
    size: int | None = None,
) -> dict[str, Any]:
    """Return a page of materials; ``size=None`` returns every match as one page."""
    page = max(page, 0)
    offset = page * size if size else 0
    items, total = materials_repo.search_materials(
        db,
        category=category or None,
        material_type=normalize_material_type(material_type) if material_type else None,
        condition=condition or None,
        query=(query or "").strip() or None,
        offset=offset,
        limit=size,
    )
    page_size = size or max(total, len(items))
    total_pages = math.ceil(total / page_size) if page_size else 0
    return {
        "content": items,
        "total_elements": total,
        "total_pages": total_pages,
        "number": page if size else 0,
        "size": page_size,
    }


def _attach_pictures(material: Material, files: Iterable[PictureFile]) -> int:
    added = 0
    for upload in files:
        if not upload.content:
            continue
        material.pictures.append(
            MaterialPicture(
                file_name=upload.file_name or "picture",
                content_type=upload.content_type or "application/octet-stream",
                file_size=len(upload.content),
                content=upload.content,
                is_primary=False,
                upload_date=datetime.utcnow(),
            )
        )
        added += 1
    _ensure_single_primary(material)
    return added


def _ensure_single_primary(material: Material, preferred: MaterialPicture | None = None) -> None:
    """Keep exactly one primary picture whenever the material has pictures."""
    if not material.pictures:
        return
    primary = preferred or next((picture for picture in material.pictures if picture.is_primary), None)
    if primary is None:
        primary = material.pictures[0]
    for picture in material.pictures:
        picture.is_primary = picture is primary


def create_material(
    db: Session,
    payload: MaterialPayload,
    *,
    user: User | None = None,
    pictures: Iterable[PictureFile] = (),
    details: str = "Material created",
) -> Material:
    data = _validated(payload.model_dump())
    material = Material(date_added=datetime.utcnow())
    _apply_values(material, data)
    db.add(material)
    picture_count = _attach_pictures(material, pictures)
    db.flush()
    if picture_count:
        details = f"{details} with {picture_count} picture(s)"
    audit_service.record(db, action=audit_service.ACTION_CREATED, material=material, user=user, details=details)
    db.commit()
    db.refresh(material)
    logger.info("Created material %s (%s)", material.id, material.material_type)
    return material


def update_material(
    db: Session,
    material_id: int,
    payload: MaterialPayload,
    *,
    user: User | None = None,
) -> Material:
    """Merge the fields present in ``payload`` into the stored material."""
    material = get_material(db, material_id)
    current = material_values(material)
    merged = {**current, **payload.model_dump(exclude_unset=True)}
    _validated(merged)

    _apply_values(material, merged)
    changed = [to_camel(name) for name in current if getattr(material, name) != current[name]]
    material.updated_at = datetime.utcnow()
    details = f"Updated {', '.join(changed)}" if changed else "Saved without changes"
    audit_service.record(db, action=audit_service.ACTION_UPDATED, material=material, user=user, details=details)
    material = materials_repo.save_material(db, material)
    logger.info("Updated material %s: %s", material.id, details)
    return material


def delete_material(db: Session, material_id: int, *, user: User | None = None) -> None:
    material = get_material(db, material_id)
    audit_service.record(
        db,
        action=audit_service.ACTION_DELETED,
        material=material,
        user=user,
        details=f"Deleted {material.name}",
    )
    materials_repo.delete_material(db, material=material)
    logger.info("Deleted material %s", material_id)


def get_stats(db: Session) -> dict[str, Any]:
    since = datetime.utcnow() - timedelta(days=RECENT_ADDITIONS_DAYS)
    return {
        "total_count": materials_repo.count_materials(db),
        "condition_counts": materials_repo.count_by(db, Material.condition),
        "type_counts": materials_repo.count_by(db, Material.material_type),
        "category_counts": materials_repo.count_by(db, Material.category),
        "recent_additions_count": materials_repo.count_added_since(db, since),
    }


def get_picture(db: Session, picture_id: int) -> MaterialPicture:
    picture = materials_repo.get_picture(db, picture_id)
    if not picture:
        raise PictureNotFoundError(picture_id)
    return picture


def _material_picture(material: Material, picture_id: int) -> MaterialPicture:
    for picture in material.pictures:
        if picture.id == picture_id:
            return picture
    raise PictureNotFoundError(picture_id)


def add_pictures(
    db: Session,
    material_id: int,
    files: Iterable[PictureFile],
    *,
    user: User | None = None,
) -> Material:
    material = get_material(db, material_id)
    added = _attach_pictures(material, files)
    if not added:
        raise InvalidMaterialError({"pictures": "At least one non-empty picture is required"})
    audit_service.record(
        db,
        action=audit_service.ACTION_UPDATED,
        material=material,
        user=user,
        details=f"Added {added} picture(s)",
    )
    return materials_repo.save_material(db, material)


def delete_picture(db: Session, material_id: int, picture_id: int, *, user: User | None = None) -> Material:
    material = get_material(db, material_id)
    picture = _material_picture(material, picture_id)
    material.pictures.remove(picture)
    _ensure_single_primary(material)
    audit_service.record(
        db,
        action=audit_service.ACTION_UPDATED,
        material=material,
        user=user,
        details=f"Removed picture {picture.file_name}",
    )
    return materials_repo.save_material(db, material)


def set_primary_picture(db: Session, material_id: int, picture_id: int, *, user: User | None = None) -> Material:
    material = get_material(db, material_id)
    picture = _material_picture(material, picture_id)
    _ensure_single_primary(material, preferred=picture)
    audit_service.record(
        db,
        action=audit_service.ACTION_UPDATED,
        material=material,
        user=user,
        details=f"Set {picture.file_name} as primary picture",
    )
    return materials_repo.save_material(db, material)
