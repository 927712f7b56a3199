from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from reclaim_tracker.materials.taxonomy import get_schema, normalize_material_type


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Picture(WireModel):
    id: int
    file_name: str = ""
    content_type: str = "application/octet-stream"
    file_size: int = 0
    upload_date: Optional[datetime] = None
    is_primary: bool = False
    description: Optional[str] = None


class MaterialRecord(WireModel):
    """Common fields shared by every material type.

    Subclasses add the attributes of one material type. Attributes outside the
    active schema are kept as extras so they survive a round trip.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[int] = None
    name: str = ""
    category: Optional[str] = None
    material_type: Optional[str] = None
    condition: Optional[str] = None
    color: Optional[str] = None
    notes: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    pictures: list[Picture] = Field(default_factory=list)
    date_added: Optional[datetime] = None

    @field_validator("pictures", mode="before")
    @classmethod
    def pictures_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def primary_picture(self) -> Picture | None:
        for picture in self.pictures:
            if picture.is_primary:
                return picture
        return self.pictures[0] if self.pictures else None

    def attributes(self) -> dict[str, Any]:
        """Type-specific attributes keyed by wire name, in schema order."""
        payload = self.model_dump(by_alias=True)
        return {name: payload.get(name) for name in get_schema(self.material_type).fields}

    def to_payload(self, *, include_id: bool = False) -> dict[str, Any]:
        exclude = {"pictures", "date_added"}
        if not include_id:
            exclude.add("id")
        return self.model_dump(by_alias=True, exclude_none=True, exclude=exclude, mode="json")


class DeskRecord(MaterialRecord):
    material_type: Literal["DESK"] = "DESK"
    desk_type: Optional[str] = None
    height_adjustable: Optional[bool] = None
    maximum_height: Optional[float] = None


class WindowRecord(MaterialRecord):
    material_type: Literal["WINDOW"] = "WINDOW"
    opening_type: Optional[str] = None
    hinge_side: Optional[str] = None
    u_value: Optional[float] = None


class DoorRecord(MaterialRecord):
    material_type: Literal["DOOR"] = "DOOR"
    swing_direction: Optional[str] = None
    u_value: Optional[float] = None


class OfficeCabinetRecord(MaterialRecord):
    material_type: Literal["OFFICE_CABINET"] = "OFFICE_CABINET"
    opening_type: Optional[str] = None


class DrawerUnitRecord(MaterialRecord):
    material_type: Literal["DRAWER_UNIT"] = "DRAWER_UNIT"
    has_wheels: Optional[bool] = None


MATERIAL_VARIANTS: Mapping[str, type[MaterialRecord]] = {
    "DESK": DeskRecord,
    "WINDOW": WindowRecord,
    "DOOR": DoorRecord,
    "OFFICE_CABINET": OfficeCabinetRecord,
    "DRAWER_UNIT": DrawerUnitRecord,
}


def variant_for(material_type: str | None) -> type[MaterialRecord]:
    return MATERIAL_VARIANTS.get(material_type or "", MaterialRecord)


def parse_material(payload: MaterialRecord | Mapping[str, Any]) -> MaterialRecord:
    """Build the record variant selected by the payload's ``materialType`` tag."""
    if isinstance(payload, MaterialRecord):
        return payload
    data = dict(payload)
    raw_type = data.get("materialType", data.get("material_type"))
    canonical = normalize_material_type(raw_type)
    if canonical:
        data.pop("material_type", None)
        data["materialType"] = canonical
    return variant_for(canonical).model_validate(data)


class Activity(WireModel):
    id: int
    action: str
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    material_id: Optional[int] = None
    material_name: Optional[str] = None
    details: Optional[str] = None
    timestamp: Optional[datetime] = None


class MaterialStats(WireModel):
    total_count: int = 0
    condition_counts: dict[str, int] = Field(default_factory=dict)
    type_counts: dict[str, int] = Field(default_factory=dict)
    category_counts: dict[str, int] = Field(default_factory=dict)
    recent_additions_count: int = 0


class ImportRowError(WireModel):
    row: int
    message: str


class ImportSummary(WireModel):
    imported_count: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class SessionUser(WireModel):
    id: int
    email: str
    roles: list[str] = Field(default_factory=list)


__all__ = [
    "Activity",
    "DeskRecord",
    "DoorRecord",
    "DrawerUnitRecord",
    "ImportRowError",
    "ImportSummary",
    "MATERIAL_VARIANTS",
    "MaterialRecord",
    "MaterialStats",
    "OfficeCabinetRecord",
    "Picture",
    "SessionUser",
    "WindowRecord",
    "parse_material",
    "variant_for",
]
