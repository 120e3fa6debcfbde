"""Unit tests for spreadsheet parsing."""

from __future__ import annotations

import io
from datetime import datetime

import pytest
import xlwt
from openpyxl import Workbook

from core.parsers.spreadsheet import (
    INVALID_FILE_TYPE_MESSAGE,
    NO_DATA_MESSAGE,
    SpreadsheetParseError,
    default_dataset_name,
    file_extension,
    is_supported_file,
    parse_spreadsheet,
)

pytestmark = pytest.mark.unit


def _xlsx_bytes(rows: list[list[object]]) -> io.BytesIO:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    second = workbook.create_sheet("Ignored")
    second.append(["other", "sheet"])
    second.append([1, 2])
    buffer = io.BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    return buffer


def test_supported_extensions_are_case_insensitive() -> None:
    """Extensions are matched case-insensitively."""

    assert file_extension("Report.XLSX") == ".xlsx"
    assert is_supported_file("data.csv")
    assert is_supported_file("legacy.XLS")
    assert not is_supported_file("notes.txt")
    assert not is_supported_file("no_extension")


def test_default_dataset_name_strips_last_extension() -> None:
    """The suggested dataset name drops only the final extension."""

    assert default_dataset_name("q1.sales.xlsx") == "q1.sales"
    assert default_dataset_name("report.csv") == "report"
    assert default_dataset_name("README") == "README"


def test_unsupported_extension_is_rejected() -> None:
    """Files with other extensions raise the user-facing invalid type message."""

    with pytest.raises(SpreadsheetParseError) as excinfo:
        parse_spreadsheet(io.BytesIO(b"a,b\n1,2\n"), filename="data.txt")
    assert str(excinfo.value) == INVALID_FILE_TYPE_MESSAGE


def test_csv_columns_equal_first_row_keys() -> None:
    """CSV uploads keep header order and numeric values."""

    body = b"Month,Revenue,Region\nJan,1200,North\nFeb,1350.5,South\n"
    parsed = parse_spreadsheet(io.BytesIO(body), filename="sales.csv")

    assert parsed.columns == ("Month", "Revenue", "Region")
    assert parsed.columns == tuple(parsed.rows[0].keys())
    assert parsed.rows == [
        {"Month": "Jan", "Revenue": 1200, "Region": "North"},
        {"Month": "Feb", "Revenue": 1350.5, "Region": "South"},
    ]
    assert isinstance(parsed.rows[0]["Revenue"], int)


def test_csv_empty_cells_are_omitted_and_blank_rows_skipped() -> None:
    """Empty cells are absent from records; fully empty rows are dropped."""

    body = b"a,b,c\n1,,x\n,,\n2,3,\n"
    parsed = parse_spreadsheet(io.BytesIO(body), filename="gaps.csv")

    assert parsed.rows == [{"a": 1, "c": "x"}, {"a": 2, "b": 3}]
    assert parsed.columns == ("a", "c")


def test_csv_keeps_na_like_text_as_text() -> None:
    """Values such as `NA` are kept as text rather than treated as missing."""

    parsed = parse_spreadsheet(io.BytesIO(b"name,score\nNA,1\nN/A,2\n"), filename="na.csv")
    assert [row["name"] for row in parsed.rows] == ["NA", "N/A"]


@pytest.mark.parametrize("body", [b"", b"Month,Revenue\n"])
def test_csv_without_data_rows_is_rejected(body: bytes) -> None:
    """Empty files and header-only files raise the no-data message."""

    with pytest.raises(SpreadsheetParseError) as excinfo:
        parse_spreadsheet(io.BytesIO(body), filename="empty.csv")
    assert str(excinfo.value) == NO_DATA_MESSAGE


def test_xlsx_reads_first_sheet_only() -> None:
    """Workbooks are read from their first worksheet."""

    buffer = _xlsx_bytes([["City", "Population"], ["Oslo", 709000], ["Bergen", 291000.0]])
    parsed = parse_spreadsheet(buffer, filename="cities.xlsx")

    assert parsed.columns == ("City", "Population")
    assert parsed.rows == [{"City": "Oslo", "Population": 709000}, {"City": "Bergen", "Population": 291000}]


def test_xlsx_dates_become_iso_text() -> None:
    """Date cells are stored as ISO-8601 strings."""

    buffer = _xlsx_bytes(
        [["When", "Count"], [datetime(2024, 3, 1), 4], [datetime(2024, 3, 2, 14, 30), 5]]
    )
    parsed = parse_spreadsheet(buffer, filename="dates.xlsx")

    assert [row["When"] for row in parsed.rows] == ["2024-03-01", "2024-03-02T14:30:00"]


def test_xlsx_unnamed_headers_get_placeholder_names() -> None:
    """Blank header cells are named `__EMPTY`, `__EMPTY_1`, ..."""

    buffer = _xlsx_bytes([["Name", None, None], ["a", 1, 2]])
    parsed = parse_spreadsheet(buffer, filename="blank_headers.xlsx")

    assert parsed.columns == ("Name", "__EMPTY", "__EMPTY_1")


def test_xlsx_booleans_become_text() -> None:
    """Boolean cells are stored as TRUE/FALSE text."""

    buffer = _xlsx_bytes([["Flag", "N"], [True, 1], [False, 2]])
    parsed = parse_spreadsheet(buffer, filename="flags.xlsx")

    assert [row["Flag"] for row in parsed.rows] == ["TRUE", "FALSE"]


def test_xlsx_header_only_sheet_is_rejected() -> None:
    """A worksheet with only a header row has no data."""

    with pytest.raises(SpreadsheetParseError) as excinfo:
        parse_spreadsheet(_xlsx_bytes([["a", "b"]]), filename="header_only.xlsx")
    assert str(excinfo.value) == NO_DATA_MESSAGE


def test_corrupt_workbook_reports_parse_failure() -> None:
    """Reader failures surface as a parse error message."""

    with pytest.raises(SpreadsheetParseError) as excinfo:
        parse_spreadsheet(io.BytesIO(b"definitely not a zip file"), filename="broken.xlsx")
    assert str(excinfo.value).startswith("Failed to parse file.")


def test_xls_columns_equal_first_row_keys() -> None:
    """Legacy .xls workbooks are read through the xlrd engine."""

    workbook = xlwt.Workbook()
    sheet = workbook.add_sheet("Sales")
    for row_idx, row in enumerate([["Month", "Revenue"], ["Jan", 10], ["Feb", 20.5]]):
        for col_idx, value in enumerate(row):
            sheet.write(row_idx, col_idx, value)
    buffer = io.BytesIO()
    workbook.save(buffer)
    buffer.seek(0)

    parsed = parse_spreadsheet(buffer, filename="legacy.xls")

    assert parsed.columns == ("Month", "Revenue")
    assert parsed.columns == tuple(parsed.rows[0].keys())
    assert parsed.rows == [{"Month": "Jan", "Revenue": 10}, {"Month": "Feb", "Revenue": 20.5}]


def test_blank_header_skips_placeholder_taken_by_real_header() -> None:
    """A blank header never reuses a placeholder name another header already has."""

    parsed = parse_spreadsheet(io.BytesIO(b"__EMPTY,,c\n1,2,3\n"), filename="taken.csv")

    assert parsed.columns == ("__EMPTY", "__EMPTY_1", "c")
    assert parsed.rows == [{"__EMPTY": 1, "__EMPTY_1": 2, "c": 3}]


def test_whitespace_only_cells_are_kept_as_text() -> None:
    """A cell holding only spaces is text, so its column stays in the dataset."""

    parsed = parse_spreadsheet(io.BytesIO(b"a,b,c\n1, ,3\n4,x,6\n"), filename="spaces.csv")

    assert parsed.columns == ("a", "b", "c")
    assert parsed.rows[0] == {"a": 1, "b": " ", "c": 3}
