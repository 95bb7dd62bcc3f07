"""Tests for reading openpyxl workbooks into the document model."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from workbook_assertions.config import Settings
from workbook_assertions.services.sheet_reader import (
    SheetReader,
    WorkbookLoadOptions,
    load_workbook_document,
    read_sheet,
)
from workbook_assertions.utils.exceptions import (
    ErrorCode,
    SheetNotFoundError,
    WorkbookLoadError,
)


def test_read_worksheet_keeps_only_present_cells(make_worksheet) -> None:
    ws = make_worksheet({"A1": "x", "C1": 2, "B5": True})

    sheet = read_sheet(ws)

    assert sheet.name == "Sheet1"
    assert sorted(sheet.rows) == [0, 4]
    assert sheet.row(1) is None
    assert sheet.row(0).cell(1) is None
    assert sheet.row(0).last_cell_num == 3
    assert sheet.row(4).cell(1).value is True
    assert sheet.row(4).cell(1).data_type == "b"


def test_read_worksheet_preserves_type_tags(make_worksheet, invoice_values) -> None:
    sheet = read_sheet(make_worksheet(invoice_values))

    assert sheet.row(1).cell(1).data_type == "n"
    assert sheet.row(1).cell(0).data_type == "s"
    assert sheet.row(3).cell(2).data_type == "f"
    assert sheet.row(3).cell(2).value == "=SUM(C2:C3)"


def test_touched_cells_read_as_blank(make_worksheet) -> None:
    ws = make_worksheet({"A1": "x"})
    ws.cell(row=1, column=4)

    row = read_sheet(ws).row(0)

    assert row.last_cell_num == 4
    assert row.cell(3).value is None


def test_load_round_trip_keeps_styled_blank_cells(tmp_path: Path) -> None:
    """Styled blanks survive a save; unstyled touched cells are dropped."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Data"
    ws["A1"] = "x"
    ws["B2"] = datetime(2024, 1, 15)
    ws["C1"].number_format = "0.00"
    ws.cell(row=3, column=4)
    path = tmp_path / "blank.xlsx"
    wb.save(path)

    sheet = SheetReader().load_sheet(path)

    assert sheet.row(0).last_cell_num == 3
    assert sheet.row(0).cell(2).value is None
    assert sheet.row(1).cell(1).data_type == "d"
    assert sheet.row(1).cell(1).value == datetime(2024, 1, 15)
    assert sheet.row(2) is None


def test_load_reads_all_sheets(save_workbook) -> None:
    path = save_workbook({"Data": {"A1": 1}, "Summary": {"B2": "=Data!A1"}})

    document = load_workbook_document(path)

    assert document.sheet_names == ["Data", "Summary"]
    assert document.metadata["sheet_names"] == ["Data", "Summary"]
    assert document.sheet("Summary").row(1).cell(1).data_type == "f"
    assert document.sheet("Missing") is None


def test_load_selects_named_sheet(save_workbook) -> None:
    path = save_workbook({"Data": {"A1": 1}, "Summary": {"A1": 2}})

    sheet = SheetReader().load_sheet(path, "Summary")

    assert sheet.name == "Summary"
    assert sheet.row(0).cell(0).value == 2


def test_load_data_only_reads_cached_values(save_workbook) -> None:
    # openpyxl does not compute formulas, so files it writes have no cache
    path = save_workbook({"Data": {"A1": 1, "A2": "=A1*2"}})

    formulas = SheetReader().load_sheet(path, data_only=False)
    cached = SheetReader().load_sheet(path, data_only=True)

    assert formulas.row(1).cell(0).data_type == "f"
    assert cached.row(1).cell(0).value is None


def test_data_only_defaults_to_settings(save_workbook) -> None:
    path = save_workbook({"Data": {"A1": "=1+1"}})

    reader = SheetReader(Settings(_env_file=None, data_only=True))
    sheet = reader.load(path, WorkbookLoadOptions()).sheets[0]

    assert sheet.row(0).cell(0).value is None


def test_read_only_worksheets_skip_padding(save_workbook) -> None:
    path = save_workbook({"Data": {"A1": "x", "C3": 5}})
    wb = load_workbook(path, read_only=True)
    try:
        sheet = read_sheet(wb["Data"])
    finally:
        wb.close()

    assert sorted(sheet.rows) == [0, 2]
    assert sheet.row(2).cell(0) is None
    assert sheet.row(2).cell(2).value == 5


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(WorkbookLoadError) as exc_info:
        SheetReader().load(tmp_path / "nope.xlsx")

    assert exc_info.value.error_code is ErrorCode.FILE_NOT_FOUND
    assert exc_info.value.details["file_path"].endswith("nope.xlsx")


def test_unsupported_extension_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n")

    with pytest.raises(WorkbookLoadError) as exc_info:
        SheetReader().load(path)

    assert exc_info.value.error_code is ErrorCode.UNSUPPORTED_FORMAT


def test_corrupt_file_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")

    with pytest.raises(WorkbookLoadError) as exc_info:
        SheetReader().load(path)

    assert exc_info.value.error_code is ErrorCode.FILE_READ_ERROR


def test_unknown_sheet_raises(save_workbook) -> None:
    path = save_workbook({"Data": {"A1": 1}})

    with pytest.raises(SheetNotFoundError) as exc_info:
        SheetReader().load_sheet(path, "Totals")

    error = exc_info.value
    assert error.error_code is ErrorCode.SHEET_NOT_FOUND
    assert error.details["available_sheets"] == ["Data"]
    assert error.file_path == str(path)
