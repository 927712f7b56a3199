from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from reclaim_api.db.base import Base


class Material(Base):
    """One reclaimed item.

    All material types share the table; ``material_type`` selects which of the
    nullable attribute columns are meaningful for a row.
    """

    __tablename__ = "materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    material_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    condition: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    width: Mapped[float | None] = mapped_column(Float, nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)
    depth: Mapped[float | None] = mapped_column(Float, nullable=True)

    desk_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    height_adjustable: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    maximum_height: Mapped[float | None] = mapped_column(Float, nullable=True)
    opening_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    hinge_side: Mapped[str | None] = mapped_column(String(50), nullable=True)
    u_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    swing_direction: Mapped[str | None] = mapped_column(String(50), nullable=True)
    has_wheels: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    pictures: Mapped[list["MaterialPicture"]] = relationship(
        back_populates="material",
        cascade="all, delete-orphan",
        order_by="MaterialPicture.id",
    )


class MaterialPicture(Base):
    __tablename__ = "material_pictures"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    material_id: Mapped[int] = mapped_column(ForeignKey("materials.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False, default="application/octet-stream")
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    upload_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    material: Mapped[Material] = relationship(back_populates="pictures")
