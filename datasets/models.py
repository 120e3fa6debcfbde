"""Database models for uploaded tabular datasets."""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

PREVIEW_ROW_LIMIT = 5


class DatasetQuerySet(models.QuerySet):
    """QuerySet helpers for creator-scoped dataset access."""

    def for_user(self, user) -> "DatasetQuerySet":
        """Return datasets created by `user`, newest first."""

        if user is None or not getattr(user, "is_authenticated", False):
            return self.none()
        return self.filter(created_by=user).order_by("-created_at", "-id")


class Dataset(models.Model):
    """A named table of rows parsed from an uploaded spreadsheet.

    Rows are stored as a list of records, each a mapping from column name to a
    string or number. Records are not forced to share keys: cells that were
    empty in the source file are absent from the record. `columns` is the key
    order of the first parsed record.

    Datasets are replaced wholesale on re-upload and never edited in place.
    """

    name = models.CharField(max_length=200)
    columns = models.JSONField(default=list, blank=True)
    rows = models.JSONField(default=list, blank=True)
    source_filename = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="datasets",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    objects = DatasetQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        """Return the dataset display name."""

        return self.name

    def clean(self) -> None:
        """Validate the stored table shape.

        Raises:
            ValidationError: When columns or rows are not lists, or when rows
                contain something other than mappings.
        """

        if not isinstance(self.columns, list):
            raise ValidationError({"columns": "Columns must be a list of names."})
        if not isinstance(self.rows, list):
            raise ValidationError({"rows": "Rows must be a list of records."})
        if any(not isinstance(row, dict) for row in self.rows):
            raise ValidationError({"rows": "Every row must be a mapping of column name to value."})

    @property
    def row_count(self) -> int:
        return len(self.rows or [])

    @property
    def column_count(self) -> int:
        return len(self.columns or [])

    def preview_rows(self, limit: int = PREVIEW_ROW_LIMIT) -> list[dict[str, str | int | float]]:
        """Return the leading rows shown in preview tables."""

        return list((self.rows or [])[:limit])
