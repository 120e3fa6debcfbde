"""Encoding/decoding helpers for dataset export files.

Exports are a JSON object with a single fixed key holding an array of dataset
payloads. Timestamps are serialized as ISO-8601 text and reconstructed into
aware datetimes on load.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Final, cast

from datasets.models import Dataset

EXPORT_KEY: Final[str] = "datasets"


@dataclass(frozen=True, slots=True)
class DecodedDataset:
    """A dataset payload read from an export file.

    Attributes:
        source_id: Identifier the dataset had when it was exported.
        name: Display name.
        columns: Ordered column names.
        rows: Row records.
        created_at: Original creation timestamp.
        created_by: Identifier of the original creator.
    """

    source_id: str
    name: str
    columns: tuple[str, ...]
    rows: list[dict[str, str | int | float]]
    created_at: datetime
    created_by: str


def encode_dataset(dataset: Dataset) -> dict[str, Any]:
    """Encode a Dataset into a JSON-serializable dictionary."""

    return {
        "id": str(dataset.pk),
        "name": dataset.name,
        "data": list(dataset.rows or []),
        "columns": list(dataset.columns or []),
        "createdAt": dataset.created_at.isoformat(),
        "createdBy": str(dataset.created_by_id),
    }


def encode_datasets(datasets: Iterable[Dataset]) -> dict[str, Any]:
    """Encode datasets into an export document.

    Args:
        datasets: Datasets to export, in the desired order.

    Returns:
        Dict with the datasets array under `EXPORT_KEY`.
    """

    return {EXPORT_KEY: [encode_dataset(dataset) for dataset in datasets]}


def decode_datasets(payload: object) -> list[DecodedDataset]:
    """Decode an export document.

    Args:
        payload: Parsed JSON, either the export document or a bare array.

    Returns:
        DecodedDataset entries in file order.

    Raises:
        ValueError: When the document or any entry is malformed.
    """

    if isinstance(payload, dict):
        payload = payload.get(EXPORT_KEY)
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of datasets under {EXPORT_KEY!r}.")

    decoded: list[DecodedDataset] = []
    for idx, entry in enumerate(payload):
        if not isinstance(entry, dict):
            raise ValueError(f"Dataset entry {idx} is not an object.")
        decoded.append(_decode_entry(cast(dict[str, Any], entry), idx=idx))
    return decoded


def _decode_entry(entry: dict[str, Any], *, idx: int) -> DecodedDataset:
    rows = entry.get("data")
    if not isinstance(rows, list) or any(not isinstance(row, dict) for row in rows):
        raise ValueError(f"Dataset entry {idx} has invalid 'data'.")

    columns = entry.get("columns")
    if columns is None:
        columns = list(rows[0].keys()) if rows else []
    if not isinstance(columns, list):
        raise ValueError(f"Dataset entry {idx} has invalid 'columns'.")

    return DecodedDataset(
        source_id=str(entry.get("id") or ""),
        name=str(entry.get("name") or f"Imported dataset {idx + 1}"),
        columns=tuple(str(column) for column in columns),
        rows=rows,
        created_at=_parse_datetime(entry.get("createdAt"), idx=idx),
        created_by=str(entry.get("createdBy") or "unknown"),
    )


def _parse_datetime(value: object, *, idx: int) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""

    if value is None or value == "":
        return datetime.now(tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Dataset entry {idx} has invalid 'createdAt': {value!r}.") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
