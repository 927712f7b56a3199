from __future__ import annotations

from reclaim_tracker.excel.ui import import_errors_frame
from reclaim_tracker.home.ui import counts_frame
from reclaim_tracker.materials.models import ImportSummary


def test_counts_frame_sorts_by_count():
    df = counts_frame({"Damaged": 1, "Reusable": 4, "Repairable": 2}, label="condition")

    assert list(df.columns) == ["condition", "count"]
    assert df["condition"].tolist() == ["Reusable", "Repairable", "Damaged"]


def test_counts_frame_empty():
    df = counts_frame({}, label="type")

    assert df.empty
    assert list(df.columns) == ["type", "count"]


def test_import_errors_frame():
    summary = ImportSummary.model_validate(
        {"importedCount": 1, "errors": [{"row": 3, "message": "Width must be a number"}]}
    )

    df = import_errors_frame(summary)

    assert df.to_dict(orient="records") == [{"Row": 3, "Problem": "Width must be a number"}]
    assert import_errors_frame(ImportSummary()).empty
