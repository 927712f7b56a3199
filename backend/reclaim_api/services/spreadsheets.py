from __future__ import annotations

import logging
from io import BytesIO
from typing import Any
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from reclaim_api.models.material import Material
from reclaim_api.models.user import User
from reclaim_api.repositories import materials as materials_repo
from reclaim_api.schemas.material import FIELD_LABELS, MATERIAL_TYPE_LABELS, MaterialPayload
from reclaim_api.services import materials as materials_service
from reclaim_api.services.errors import InvalidMaterialError, SpreadsheetImportError

logger = logging.getLogger("reclaim_api.services.spreadsheets")

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Column order of the export, the template and the import.
COLUMNS: list[tuple[str, str]] = [
    ("Name", "name"),
    ("Category", "category"),
    ("Material Type", "material_type"),
    ("Condition", "condition"),
    ("Color", "color"),
    ("Notes", "notes"),
    ("Width", "width"),
    ("Height", "height"),
    ("Depth", "depth"),
    ("Desk Type", "desk_type"),
    ("Height Adjustable", "height_adjustable"),
    ("Max Height", "maximum_height"),
    ("Opening Type", "opening_type"),
    ("Hinge Side", "hinge_side"),
    ("U-Value", "u_value"),
    ("Swing Direction", "swing_direction"),
    ("Has Wheels", "has_wheels"),
]
HEADERS = [header for header, _ in COLUMNS]
NUMERIC_COLUMNS = {"width", "height", "depth", "maximum_height", "u_value"}
BOOLEAN_COLUMNS = {"height_adjustable", "has_wheels"}
_TRUE_STRINGS = {"true", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "no", "n", "0"}

TEMPLATE_EXAMPLES: list[dict[str, Any]] = [
    {
        "name": "Corner Office Desk",
        "category": "Furniture",
        "material_type": "DESK",
        "condition": "Reusable",
        "color": "Oak",
        "notes": "Slightly scratched on the right side",
        "width": 160.0,
        "height": 75.0,
        "depth": 80.0,
        "desk_type": "CORNER_DESK",
        "height_adjustable": True,
        "maximum_height": 120.0,
    },
    {
        "name": "Double Glazed Window",
        "category": "Windows",
        "material_type": "WINDOW",
        "condition": "Reusable",
        "color": "White",
        "width": 120.0,
        "height": 150.0,
        "depth": 10.0,
        "opening_type": "SIDE_HUNG",
        "hinge_side": "RIGHT",
        "u_value": 1.2,
    },
    {
        "name": "Oak Interior Door",
        "category": "Doors",
        "material_type": "DOOR",
        "condition": "Repairable",
        "color": "Oak",
        "width": 90.0,
        "height": 210.0,
        "depth": 4.0,
        "swing_direction": "LEFT",
    },
    {
        "name": "Mobile Drawer Unit",
        "category": "Storage",
        "material_type": "DRAWER_UNIT",
        "condition": "Reusable",
        "color": "Black",
        "width": 60.0,
        "height": 75.0,
        "depth": 45.0,
        "has_wheels": True,
    },
    {
        "name": "Filing Cabinet",
        "category": "Storage",
        "material_type": "OFFICE_CABINET",
        "condition": "Damaged",
        "color": "Grey",
        "width": 80.0,
        "height": 180.0,
        "depth": 40.0,
        "opening_type": "SLIDING_DOORS",
    },
]


def _wb_to_bytes(wb: Workbook) -> bytes:
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def _new_sheet(title: str) -> tuple[Workbook, Any]:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    return wb, ws


def _row_values(values: dict[str, Any]) -> list[Any]:
    row = []
    for _, name in COLUMNS:
        value = values.get(name)
        if name == "material_type" and value:
            value = MATERIAL_TYPE_LABELS.get(value, value)
        row.append(value)
    return row


def _autosize(ws) -> None:
    for column_cells in ws.columns:
        width = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        ws.column_dimensions[column_cells[0].column_letter].width = min(max(width + 2, 10), 50)


def export_materials(db: Session) -> bytes:
    wb, ws = _new_sheet("Materials")
    for material in materials_repo.list_materials(db):
        ws.append(_row_values(materials_service.material_values(material)))
    _autosize(ws)
    return _wb_to_bytes(wb)


def build_template() -> bytes:
    wb, ws = _new_sheet("Materials")
    for example in TEMPLATE_EXAMPLES:
        ws.append(_row_values(example))
    _autosize(ws)
    return _wb_to_bytes(wb)


def _parse_number(name: str, value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = str(value).strip()
    if not cleaned:
        return None
    try:
        return float(cleaned.replace(",", "."))
    except ValueError as exc:
        raise ValueError(f"{FIELD_LABELS[name]} must be a number") from exc


def _parse_bool(name: str, value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    cleaned = str(value).strip().lower()
    if not cleaned:
        return None
    if cleaned in _TRUE_STRINGS:
        return True
    if cleaned in _FALSE_STRINGS:
        return False
    raise ValueError(f"{FIELD_LABELS[name]} must be yes or no")


def _parse_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    cleaned = str(value).strip()
    return cleaned or None


def parse_row(cells: tuple[Any, ...]) -> dict[str, Any]:
    """Turn one worksheet row into material fields; raises ValueError on bad cells."""
    values: dict[str, Any] = {}
    problems: list[str] = []
    for index, (_, name) in enumerate(COLUMNS):
        raw = cells[index] if index < len(cells) else None
        try:
            if name in NUMERIC_COLUMNS:
                values[name] = _parse_number(name, raw)
            elif name in BOOLEAN_COLUMNS:
                values[name] = _parse_bool(name, raw)
            else:
                values[name] = _parse_text(raw)
        except ValueError as exc:
            problems.append(str(exc))
    if problems:
        raise ValueError("; ".join(problems))
    return values


def _is_blank(cells: tuple[Any, ...]) -> bool:
    return all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in cells)


def import_materials(db: Session, content: bytes, *, user: User | None = None) -> dict[str, Any]:
    """Create one material per valid row and report the invalid ones.

    Row numbers in the report are worksheet row numbers, so the header is
    row 1 and the first data row is row 2.
    """
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, OSError, ValueError, KeyError) as exc:
        raise SpreadsheetImportError(f"Failed to read Excel file: {exc}") from exc

    imported: list[Material] = []
    errors: list[dict[str, Any]] = []
    try:
        ws = wb.worksheets[0]
        for row_number, cells in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if _is_blank(cells):
                continue
            try:
                payload = MaterialPayload.model_validate(parse_row(cells))
                material = materials_service.create_material(
                    db,
                    payload,
                    user=user,
                    details="Imported from spreadsheet",
                )
            except InvalidMaterialError as exc:
                db.rollback()
                errors.append({"row": row_number, "message": "; ".join(exc.errors.values())})
            except (ValueError, ValidationError) as exc:
                db.rollback()
                errors.append({"row": row_number, "message": str(exc)})
            else:
                imported.append(material)
    finally:
        wb.close()

    logger.info("Spreadsheet import: %s created, %s rejected", len(imported), len(errors))
    return {"imported_count": len(imported), "errors": errors}
