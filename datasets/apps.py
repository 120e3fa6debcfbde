"""Django app configuration for uploaded datasets."""

from __future__ import annotations

from django.apps import AppConfig


class DatasetsConfig(AppConfig):
    """AppConfig for user-owned datasets."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "datasets"
    verbose_name = "Datasets"
