from __future__ import annotations

from collections.abc import Mapping


class MaterialNotFoundError(LookupError):
    def __init__(self, material_id: int):
        super().__init__(f"Material {material_id} not found")
        self.material_id = material_id


class PictureNotFoundError(LookupError):
    def __init__(self, picture_id: int):
        super().__init__(f"Picture {picture_id} not found")
        self.picture_id = picture_id


class InvalidMaterialError(ValueError):
    """Raised with per-field messages keyed by camelCase field name."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid material")


class SpreadsheetImportError(ValueError):
    pass
