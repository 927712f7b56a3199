from reclaim_api.models.audit import AuditEntry
from reclaim_api.models.material import Material, MaterialPicture
from reclaim_api.models.user import User

__all__ = [
    "AuditEntry",
    "Material",
    "MaterialPicture",
    "User",
]
