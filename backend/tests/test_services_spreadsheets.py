from __future__ import annotations

from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from reclaim_api.models.audit import AuditEntry
from reclaim_api.schemas.material import MaterialPayload
from reclaim_api.services import materials as materials_service
from reclaim_api.services import spreadsheets as spreadsheets_service
from reclaim_api.services.errors import SpreadsheetImportError


def _workbook_bytes(rows):
    wb = Workbook()
    ws = wb.active
    ws.append(spreadsheets_service.HEADERS)
    for row in rows:
        ws.append(row)
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def _row(**values):
    return [values.get(field) for _, field in spreadsheets_service.COLUMNS]


def test_template_has_headers_and_one_example_per_type():
    wb = load_workbook(BytesIO(spreadsheets_service.build_template()))
    rows = list(wb.active.iter_rows(values_only=True))

    assert list(rows[0]) == spreadsheets_service.HEADERS
    assert len(spreadsheets_service.HEADERS) == 17
    assert {row[2] for row in rows[1:]} == {"Desk", "Window", "Door", "DrawerUnit", "OfficeCabinet"}


def test_template_rows_import_cleanly(db_session):
    summary = spreadsheets_service.import_materials(db_session, spreadsheets_service.build_template())

    assert summary == {"imported_count": 5, "errors": []}


def test_export_writes_one_row_per_material(db_session):
    materials_service.create_material(
        db_session,
        MaterialPayload.model_validate(
            {
                "name": "Oak Door",
                "category": "Doors",
                "materialType": "DOOR",
                "condition": "Repairable",
                "color": "Oak",
                "width": 90,
                "height": 210,
                "depth": 4,
                "swingDirection": "LEFT",
            }
        ),
    )

    wb = load_workbook(BytesIO(spreadsheets_service.export_materials(db_session)))
    rows = list(wb.active.iter_rows(values_only=True))

    assert len(rows) == 2
    exported = dict(zip(spreadsheets_service.HEADERS, rows[1]))
    assert exported["Name"] == "Oak Door"
    assert exported["Material Type"] == "Door"
    assert exported["Swing Direction"] == "LEFT"
    assert exported["Desk Type"] is None


def test_import_reports_bad_rows_with_sheet_row_numbers(db_session):
    content = _workbook_bytes(
        [
            _row(
                name="Desk A",
                category="Furniture",
                material_type="Desk",
                condition="Reusable",
                color="Oak",
                width=160,
                height=75,
                depth=80,
                desk_type="STRAIGHT_DESK",
                height_adjustable="no",
            ),
            _row(name="Broken", category="Furniture", material_type="Desk", condition="Reusable", width="wide"),
            [None] * 17,
            _row(
                name="Drawers",
                category="Storage",
                material_type="DrawerUnit",
                condition="Damaged",
                color="Grey",
                width=60,
                height=70,
                depth=45,
                has_wheels="yes",
            ),
        ]
    )

    summary = spreadsheets_service.import_materials(db_session, content)

    assert summary["imported_count"] == 2
    assert len(summary["errors"]) == 1
    assert summary["errors"][0]["row"] == 3
    assert "Width must be a number" in summary["errors"][0]["message"]
    assert db_session.query(AuditEntry).count() == 2


def test_import_rejects_unreadable_file(db_session):
    with pytest.raises(SpreadsheetImportError):
        spreadsheets_service.import_materials(db_session, b"not a workbook")


def test_parse_row_coerces_cells():
    values = spreadsheets_service.parse_row(
        tuple(_row(name=" Desk ", width="12,5", height_adjustable="Yes", color=3.0))
    )

    assert values["name"] == "Desk"
    assert values["width"] == 12.5
    assert values["height_adjustable"] is True
    assert values["color"] == "3"
