from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from reclaim_api.models.material import Material, MaterialPicture


def _search_stmt(
    *,
    category: str | None = None,
    material_type: str | None = None,
    condition: str | None = None,
    query: str | None = None,
):
    stmt = select(Material)
    if category:
        stmt = stmt.where(Material.category == category)
    if material_type:
        stmt = stmt.where(Material.material_type == material_type)
    if condition:
        stmt = stmt.where(Material.condition == condition)
    if query:
        pattern = f"%{query.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(Material.name).like(pattern),
                func.lower(Material.category).like(pattern),
                func.lower(Material.material_type).like(pattern),
                func.lower(Material.condition).like(pattern),
            )
        )
    return stmt


def search_materials(
    db: Session,
    *,
    category: str | None = None,
    material_type: str | None = None,
    condition: str | None = None,
    query: str | None = None,
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[Material], int]:
    stmt = _search_stmt(category=category, material_type=material_type, condition=condition, query=query)
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    stmt = stmt.options(selectinload(Material.pictures)).order_by(Material.id.asc()).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(db.scalars(stmt).all()), int(total)


def list_materials(db: Session) -> list[Material]:
    stmt = select(Material).order_by(Material.id.asc())
    return list(db.scalars(stmt).all())


def get_material(db: Session, material_id: int) -> Material | None:
    return db.get(Material, material_id)


def save_material(db: Session, material: Material) -> Material:
    db.add(material)
    db.commit()
    db.refresh(material)
    return material


def delete_material(db: Session, *, material: Material) -> None:
    db.delete(material)
    db.commit()


def count_materials(db: Session) -> int:
    return db.scalar(select(func.count(Material.id))) or 0


def count_by(db: Session, column) -> dict[str, int]:
    stmt = select(column, func.count(Material.id)).group_by(column)
    return {str(value): int(count) for value, count in db.execute(stmt).all() if value is not None}


def count_added_since(db: Session, since: datetime) -> int:
    return db.scalar(select(func.count(Material.id)).where(Material.date_added >= since)) or 0


def get_picture(db: Session, picture_id: int) -> MaterialPicture | None:
    return db.get(MaterialPicture, picture_id)
