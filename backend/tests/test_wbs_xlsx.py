import datetime as dt
from pathlib import Path

import openpyxl

from app.services.etl.parsers.wbs_xlsx import read_wbs_workbook


def _make_book(tmp_path: Path, rows: list[list], title: str = "Sheet1") -> Path:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title
    for r in rows:
        ws.append(r)
    p = tmp_path / "wbs.xlsx"
    wb.save(p)
    return p


HEADER = ["wbsCode", "wbsName", "wbsType", "amount", "startDate", "endDate", "duration"]


def test_reads_typed_cells(tmp_path):
    path = _make_book(tmp_path, [
        HEADER,
        ["1", "Engineering", "Summary", 5000],
        ["1.1", "Design", "WorkPackage", 2000.0],
        ["1.1.1", "Drawings", "Activity", None, dt.date(2024, 1, 8), dt.date(2024, 1, 19), 12],
    ])
    result = read_wbs_workbook(str(path))
    assert result.errors == []
    assert [r.code for r in result.rows] == ["1", "1.1", "1.1.1"]
    assert str(result.rows[1].amount) == "2000"
    assert result.rows[2].start_date == dt.date(2024, 1, 8)
    assert result.rows[2].duration == 12


def test_errors_use_sheet_row_numbers(tmp_path):
    path = _make_book(tmp_path, [
        HEADER,
        ["1", "Engineering", "Summary", 5000],
        [None],
        ["2", "Bad", "Phase", 10],
    ])
    result = read_wbs_workbook(str(path))
    assert [r.code for r in result.rows] == ["1"]
    assert result.messages == ["Line 4: Invalid WBS type - must be Summary, WorkPackage, or Activity"]


def test_prefers_wbs_sheet(tmp_path):
    wb = openpyxl.Workbook()
    wb.active.append(["notes"])
    ws = wb.create_sheet("WBS")
    ws.append(HEADER)
    ws.append(["1", "Engineering", "Summary", 100])
    p = tmp_path / "book.xlsx"
    wb.save(p)
    result = read_wbs_workbook(str(p))
    assert result.errors == []
    assert len(result.rows) == 1


def test_missing_columns(tmp_path):
    path = _make_book(tmp_path, [["wbsCode", "wbsName"], ["1", "Engineering"]])
    result = read_wbs_workbook(str(path))
    assert result.rows == []
    assert result.messages == ["Missing required columns: wbsType"]


def test_extra_cells_are_a_mismatch(tmp_path):
    path = _make_book(tmp_path, [["wbsCode", "wbsName", "wbsType", "amount"], ["1", "Eng", "Summary", 10, "extra"]])
    result = read_wbs_workbook(str(path))
    assert result.messages == ["Line 2: Column count mismatch (expected 4, got 5)"]
