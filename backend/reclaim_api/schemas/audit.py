from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from reclaim_api.schemas.material import CamelModel


class AuditEntryRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    action: str
    material_id: int | None = None
    material_name: str | None = None
    user_id: int | None = None
    user_name: str | None = None
    details: str | None = None
    timestamp: datetime
