"""Spreadsheet parsing for dataset uploads.

Only the first worksheet of a workbook is read. The first row is the header and
every following non-empty row becomes a record:

- Empty cells are omitted from the record. Whitespace-only text is kept as text.
- Numbers stay numbers; dates become ISO-8601 text; anything else is text.
- The dataset columns are the keys of the first record.
"""

from __future__ import annotations

import io
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import PurePath
from typing import IO, Final
from zipfile import BadZipFile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from pandas.api import types as pd_types
from xlrd import XLRDError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = (".xlsx", ".xls", ".csv")

INVALID_FILE_TYPE_MESSAGE: Final[str] = "Invalid file type. Only Excel and CSV files are supported."
NO_DATA_MESSAGE: Final[str] = "No data found in the file."
PARSE_FAILED_MESSAGE: Final[str] = "Failed to parse file."

_EXCEL_ENGINES: Final[dict[str, str]] = {".xlsx": "openpyxl", ".xls": "xlrd"}
_UNNAMED_HEADER_RE = re.compile(r"^Unnamed: \d+$")
_READER_ERRORS = (ValueError, OSError, KeyError, IndexError, BadZipFile, InvalidFileException, XLRDError)

CellValue = str | int | float


class SpreadsheetParseError(ValueError):
    """Raised when an uploaded file cannot be turned into a table.

    The message is user-facing and is displayed as-is.
    """


@dataclass(frozen=True, slots=True)
class ParsedSpreadsheet:
    """Parsed output for a spreadsheet upload.

    Attributes:
        columns: Keys of the first record, in order.
        rows: Records in file order.
    """

    columns: tuple[str, ...]
    rows: list[dict[str, CellValue]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def file_extension(filename: str) -> str:
    """Return the lowercased extension of `filename` including the dot."""

    return PurePath(filename or "").suffix.lower()


def is_supported_file(filename: str) -> bool:
    """Return True when `filename` has a supported spreadsheet extension."""

    return file_extension(filename) in SUPPORTED_EXTENSIONS


def default_dataset_name(filename: str) -> str:
    """Return the filename without its last extension.

    Args:
        filename: Uploaded filename, possibly with a directory component.

    Returns:
        The display name suggested for a new dataset.
    """

    base = PurePath(filename or "").name
    stem, dot, _ext = base.rpartition(".")
    if not dot or not stem:
        return base
    return stem


def parse_spreadsheet(file_obj: IO[bytes], *, filename: str) -> ParsedSpreadsheet:
    """Parse an uploaded spreadsheet into columns and records.

    Args:
        file_obj: Binary file-like object positioned at the start of the file.
        filename: Original filename, used to select the reader.

    Returns:
        ParsedSpreadsheet with at least one record.

    Raises:
        SpreadsheetParseError: When the extension is unsupported, the reader
            fails, or the file has no data rows.
    """

    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetParseError(INVALID_FILE_TYPE_MESSAGE)

    if hasattr(file_obj, "seek"):
        file_obj.seek(0)
    payload = io.BytesIO(file_obj.read())
    frame = _read_frame(payload, extension=extension, filename=filename)
    frame = frame.rename(columns=_header_names(list(frame.columns)))
    frame = frame.dropna(how="all")

    rows: list[dict[str, CellValue]] = []
    for record in frame.to_dict(orient="records"):
        row = _clean_record(record)
        if row:
            rows.append(row)

    if not rows:
        raise SpreadsheetParseError(NO_DATA_MESSAGE)

    logger.info("Parsed %s: %d rows, %d columns", filename, len(rows), len(rows[0]))
    return ParsedSpreadsheet(columns=tuple(rows[0].keys()), rows=rows)


def _read_frame(file_obj: IO[bytes], *, extension: str, filename: str) -> pd.DataFrame:
    """Read the first sheet (or the CSV body) into a DataFrame."""

    try:
        if extension == ".csv":
            return pd.read_csv(file_obj, keep_default_na=False, na_values=[""])
        return pd.read_excel(
            file_obj,
            sheet_name=0,
            engine=_EXCEL_ENGINES[extension],
            keep_default_na=False,
            na_values=[""],
        )
    except pd.errors.EmptyDataError as exc:
        raise SpreadsheetParseError(NO_DATA_MESSAGE) from exc
    except _READER_ERRORS as exc:
        logger.warning("Could not read %s: %s", filename, exc)
        detail = str(exc).strip()
        message = f"{PARSE_FAILED_MESSAGE} {detail}" if detail else PARSE_FAILED_MESSAGE
        raise SpreadsheetParseError(message) from exc


def _header_names(headers: list[object]) -> dict[object, str]:
    """Map raw DataFrame headers to record keys.

    Headers left blank in the file are named `__EMPTY`, `__EMPTY_1`, ...; names
    already taken by a real header are skipped.
    """

    taken = {str(header) for header in headers if not _UNNAMED_HEADER_RE.match(str(header))}
    mapping: dict[object, str] = {}
    empty_count = 0
    for header in headers:
        text = str(header)
        if _UNNAMED_HEADER_RE.match(text):
            text = _placeholder_name(empty_count)
            while text in taken:
                empty_count += 1
                text = _placeholder_name(empty_count)
            taken.add(text)
            empty_count += 1
        mapping[header] = text
    return mapping


def _placeholder_name(index: int) -> str:
    return "__EMPTY" if index == 0 else f"__EMPTY_{index}"


def _clean_record(record: Mapping[object, object]) -> dict[str, CellValue]:
    """Drop empty cells and normalize cell values for JSON storage."""

    row: dict[str, CellValue] = {}
    for key, value in record.items():
        cleaned = _clean_cell(value)
        if cleaned is None:
            continue
        row[str(key)] = cleaned
    return row


def _clean_cell(value: object) -> CellValue | None:
    """Normalize a single cell value.

    Returns:
        A string or number, or None when the cell is empty.
    """

    if value is None:
        return None
    if pd_types.is_scalar(value) and pd.isna(value):
        return None
    if pd_types.is_bool(value):
        return "TRUE" if value else "FALSE"
    if pd_types.is_integer(value):
        return int(value)
    if pd_types.is_float(value):
        number = float(value)
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        return int(number) if number.is_integer() else number
    if isinstance(value, datetime):
        if value.time() == time(0, 0) and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)
