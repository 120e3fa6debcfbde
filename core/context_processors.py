"""Template context processors for ChartDesk."""

from __future__ import annotations

from dataclasses import dataclass

from django.http import HttpRequest
from django.urls import reverse


@dataclass(frozen=True, slots=True)
class NavItem:
    """A sidebar navigation entry."""

    label: str
    url: str
    url_name: str
    icon: str


def navigation(request: HttpRequest) -> dict[str, object]:
    """Expose sidebar navigation to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `nav_items`, `admin_nav_items` (staff only) and
        `active_url_name`.
    """

    match = getattr(request, "resolver_match", None)
    active = f"{match.namespace}:{match.url_name}" if match is not None and match.namespace else ""

    nav_items = (
        NavItem(label="Dashboard", url=reverse("core:dashboard"), url_name="core:dashboard", icon="home"),
        NavItem(label="Upload Data", url=reverse("core:upload"), url_name="core:upload", icon="upload"),
        NavItem(
            label="Visualizations",
            url=reverse("core:visualizations"),
            url_name="core:visualizations",
            icon="chart",
        ),
        NavItem(label="History", url=reverse("core:history"), url_name="core:history", icon="history"),
    )

    admin_nav_items: tuple[NavItem, ...] = ()
    user = getattr(request, "user", None)
    if user is not None and getattr(user, "is_staff", False):
        admin_nav_items = (
            NavItem(
                label="Manage Users",
                url=reverse("admin:auth_user_changelist"),
                url_name="admin:auth_user_changelist",
                icon="users",
            ),
            NavItem(label="Settings", url=reverse("admin:index"), url_name="admin:index", icon="settings"),
        )

    return {"nav_items": nav_items, "admin_nav_items": admin_nav_items, "active_url_name": active}
