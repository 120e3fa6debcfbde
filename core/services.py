"""Service-layer functions for the core app.

Services coordinate Django persistence concerns (ORM, transactions, session
state) with the pure parsing and analysis modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils.timesince import timesince

from core.parsers.spreadsheet import (
    NO_DATA_MESSAGE,
    ParsedSpreadsheet,
    SpreadsheetParseError,
    default_dataset_name,
    parse_spreadsheet,
)
from core.selection import clear_current_dataset, is_current_dataset
from datasets.models import Dataset

logger = logging.getLogger(__name__)

RECENT_DATASET_LIMIT = 5


@dataclass(frozen=True, slots=True)
class DashboardStat:
    """A single headline number on the dashboard."""

    name: str
    value: str | int
    icon: str


def create_dataset(*, user, name: str, parsed: ParsedSpreadsheet, source_filename: str = "") -> Dataset:
    """Persist a parsed spreadsheet as a new Dataset.

    Args:
        user: Creator of the dataset.
        name: Display name; blank names fall back to the source filename.
        parsed: Parsed spreadsheet with at least one row.
        source_filename: Original uploaded filename.

    Returns:
        The created Dataset.

    Raises:
        SpreadsheetParseError: When `parsed` has no rows.
    """

    if not parsed.rows:
        raise SpreadsheetParseError(NO_DATA_MESSAGE)

    display_name = (name or "").strip() or default_dataset_name(source_filename) or "Untitled dataset"
    with transaction.atomic():
        dataset = Dataset.objects.create(
            name=display_name,
            columns=list(parsed.columns),
            rows=parsed.rows,
            source_filename=source_filename,
            created_by=user,
        )
    logger.info(
        "Created dataset %s (%r) for user %s: %d rows",
        dataset.pk,
        dataset.name,
        user.pk,
        dataset.row_count,
    )
    return dataset


def ingest_spreadsheet(file_obj: IO[bytes], *, filename: str, user, name: str | None = None) -> Dataset:
    """Parse an uploaded file and persist it in one step.

    Args:
        file_obj: Binary file-like object.
        filename: Original filename (selects the reader).
        user: Creator of the dataset.
        name: Optional display name; defaults to the filename without extension.

    Returns:
        The created Dataset.

    Raises:
        SpreadsheetParseError: When the file cannot be parsed or has no rows.
    """

    parsed = parse_spreadsheet(file_obj, filename=filename)
    return create_dataset(user=user, name=name or "", parsed=parsed, source_filename=filename)


def remove_dataset(request: HttpRequest, dataset_id: int) -> bool:
    """Delete one of the requesting user's datasets.

    Removing the currently selected dataset clears the selection.

    Args:
        request: Authenticated request (owner scope and session).
        dataset_id: Primary key of the dataset to remove.

    Returns:
        True when a dataset was deleted.
    """

    deleted, _ = Dataset.objects.for_user(request.user).filter(pk=dataset_id).delete()
    if is_current_dataset(request, dataset_id):
        clear_current_dataset(request)
    if deleted:
        logger.info("Removed dataset %s for user %s", dataset_id, request.user.pk)
    return bool(deleted)


def recent_datasets(user, *, limit: int = RECENT_DATASET_LIMIT) -> QuerySet[Dataset]:
    """Return the user's most recently created datasets, newest first."""

    return Dataset.objects.for_user(user)[:limit]


def dashboard_stats(user) -> tuple[DashboardStat, ...]:
    """Return the headline numbers shown on the dashboard.

    Args:
        user: Authenticated user.

    Returns:
        Stats for dataset count, total rows, site-wide active users and last upload time.
    """

    datasets = list(Dataset.objects.for_user(user).only("rows", "created_at"))
    total_rows = sum(dataset.row_count for dataset in datasets)
    last_upload = f"{timesince(datasets[0].created_at)} ago" if datasets else "N/A"
    active_users = get_user_model().objects.filter(is_active=True).count()
    return (
        DashboardStat(name="Total Datasets", value=len(datasets), icon="datasets"),
        DashboardStat(name="Total Rows", value=total_rows, icon="rows"),
        DashboardStat(name="Active Users", value=active_users, icon="team"),
        DashboardStat(name="Last Upload", value=last_upload, icon="clock"),
    )
