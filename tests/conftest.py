"""Pytest fixtures shared across Django integration tests."""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence

import pytest
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import Workbook


SALES_ROWS: list[dict[str, str | int | float]] = [
    {"Month": "Jan", "Revenue": 1200, "Region": "North"},
    {"Month": "Feb", "Revenue": 1350.5, "Region": "North"},
    {"Month": "Mar", "Revenue": 980, "Region": "South"},
    {"Month": "Apr", "Revenue": 1510, "Region": "South"},
    {"Month": "May", "Revenue": 1720, "Region": "East"},
    {"Month": "Jun", "Revenue": 1605, "Region": "East"},
]


@pytest.fixture
def user(db):
    """Return a User for authenticated requests."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="alice", password="password", email="alice@example.com")


@pytest.fixture
def auth_client(client, user):
    """Return a Django test client authenticated as the default test user."""

    client.force_login(user)
    return client


@pytest.fixture
def sales_rows() -> list[dict[str, str | int | float]]:
    """Return a copy of the rows stored by the `dataset` fixture."""

    return [dict(row) for row in SALES_ROWS]


@pytest.fixture
def dataset(user):
    """Return a small sales Dataset owned by the default test user."""

    from datasets.models import Dataset

    return Dataset.objects.create(
        name="Sales",
        columns=["Month", "Revenue", "Region"],
        rows=[dict(row) for row in SALES_ROWS],
        source_filename="sales.csv",
        created_by=user,
    )


@pytest.fixture
def csv_upload() -> Callable[..., SimpleUploadedFile]:
    """Return a factory for in-memory CSV uploads."""

    def _make(text: str, *, name: str = "sales.csv") -> SimpleUploadedFile:
        return SimpleUploadedFile(name, text.encode("utf-8"), content_type="text/csv")

    return _make


@pytest.fixture
def xlsx_upload() -> Callable[..., SimpleUploadedFile]:
    """Return a factory for in-memory single-sheet XLSX uploads."""

    def _make(rows: Sequence[Sequence[object]], *, name: str = "sales.xlsx") -> SimpleUploadedFile:
        workbook = Workbook()
        sheet = workbook.active
        for row in rows:
            sheet.append(list(row))
        buffer = io.BytesIO()
        workbook.save(buffer)
        return SimpleUploadedFile(
            name,
            buffer.getvalue(),
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    return _make


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
