"""Minimal smoke tests for project scaffolding."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit


def test_analysis_package_exports_inference() -> None:
    """Import the analysis package and verify the public entry points exist."""

    from analysis import is_numeric_column, numeric_columns

    assert callable(is_numeric_column)
    assert callable(numeric_columns)


def test_django_project_loads() -> None:
    """Import and initialize Django to verify settings are valid."""

    import os

    import django
    from django.conf import settings

    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "chartdesk.settings")
    django.setup()
    assert "core.apps.CoreConfig" in settings.INSTALLED_APPS
    assert "datasets.apps.DatasetsConfig" in settings.INSTALLED_APPS
