"""Per-session UI state: the current dataset and a staged upload.

The current dataset is the one the visualization page works on. A staged upload
is a parsed file held between the preview step and the user's confirmation.
Both live in the Django session under fixed keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from django.http import HttpRequest

from core.parsers.spreadsheet import CellValue, ParsedSpreadsheet, default_dataset_name
from datasets.models import Dataset

CURRENT_DATASET_SESSION_KEY: Final[str] = "chartdesk_current_dataset_id"
STAGED_UPLOAD_SESSION_KEY: Final[str] = "chartdesk_staged_upload"


@dataclass(frozen=True, slots=True)
class StagedUpload:
    """A parsed spreadsheet awaiting confirmation.

    Attributes:
        filename: Original uploaded filename.
        suggested_name: Default dataset name derived from the filename.
        parsed: Parsed columns and rows.
    """

    filename: str
    suggested_name: str
    parsed: ParsedSpreadsheet


def get_current_dataset(request: HttpRequest) -> Dataset | None:
    """Return the selected dataset for the session, if it still exists.

    A stale selection (deleted dataset, or one owned by another user) is cleared.
    """

    dataset_id = request.session.get(CURRENT_DATASET_SESSION_KEY)
    if dataset_id is None:
        return None
    dataset = Dataset.objects.for_user(request.user).filter(pk=dataset_id).first()
    if dataset is None:
        clear_current_dataset(request)
    return dataset


def set_current_dataset(request: HttpRequest, dataset: Dataset | None) -> None:
    """Select `dataset` for the session, or clear the selection when None."""

    if dataset is None:
        clear_current_dataset(request)
        return
    request.session[CURRENT_DATASET_SESSION_KEY] = dataset.pk
    request.session.modified = True


def clear_current_dataset(request: HttpRequest) -> None:
    request.session.pop(CURRENT_DATASET_SESSION_KEY, None)
    request.session.modified = True


def is_current_dataset(request: HttpRequest, dataset_id: int) -> bool:
    """Return True when `dataset_id` is the session's selected dataset."""

    return request.session.get(CURRENT_DATASET_SESSION_KEY) == dataset_id


def stage_upload(request: HttpRequest, parsed: ParsedSpreadsheet, *, filename: str) -> StagedUpload:
    """Hold a parsed spreadsheet in the session until it is confirmed.

    Args:
        request: Request whose session stores the upload.
        parsed: Parsed spreadsheet.
        filename: Original filename.

    Returns:
        The StagedUpload that was stored.
    """

    staged = StagedUpload(filename=filename, suggested_name=default_dataset_name(filename), parsed=parsed)
    request.session[STAGED_UPLOAD_SESSION_KEY] = {
        "filename": staged.filename,
        "suggested_name": staged.suggested_name,
        "columns": list(parsed.columns),
        "rows": parsed.rows,
    }
    request.session.modified = True
    return staged


def get_staged_upload(request: HttpRequest) -> StagedUpload | None:
    """Return the staged upload for the session, if any."""

    payload: dict[str, Any] | None = request.session.get(STAGED_UPLOAD_SESSION_KEY)
    if not payload:
        return None
    rows: list[dict[str, CellValue]] = list(payload.get("rows") or [])
    return StagedUpload(
        filename=str(payload.get("filename") or ""),
        suggested_name=str(payload.get("suggested_name") or ""),
        parsed=ParsedSpreadsheet(columns=tuple(payload.get("columns") or ()), rows=rows),
    )


def clear_staged_upload(request: HttpRequest) -> None:
    request.session.pop(STAGED_UPLOAD_SESSION_KEY, None)
    request.session.modified = True
