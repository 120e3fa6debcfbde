"""Admin registrations for dataset models."""

from __future__ import annotations

from django.contrib import admin
from django.db.models import QuerySet

from datasets.models import Dataset


class CreatorScopedAdmin(admin.ModelAdmin):
    """ModelAdmin that scopes querysets to the creator and assigns ownership on create."""

    owner_field_name = "created_by"

    def get_queryset(self, request) -> QuerySet:
        """Return a queryset scoped to the authenticated user."""

        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs
        return qs.filter(**{self.owner_field_name: request.user})

    def get_readonly_fields(self, request, obj=None):  # type: ignore[override]
        """Prevent non-superusers from reassigning ownership."""

        readonly = list(super().get_readonly_fields(request, obj=obj))
        if not request.user.is_superuser and self.owner_field_name not in readonly:
            readonly.append(self.owner_field_name)
        return tuple(readonly)

    def save_model(self, request, obj, form, change) -> None:  # type: ignore[override]
        """Assign the creator automatically for non-superusers."""

        if not request.user.is_superuser and not change:
            setattr(obj, self.owner_field_name, request.user)
        super().save_model(request, obj, form, change)


@admin.register(Dataset)
class DatasetAdmin(CreatorScopedAdmin):
    """Admin configuration for Dataset."""

    list_display = ("name", "created_by", "column_count", "row_count", "created_at")
    list_filter = ("created_by",)
    search_fields = ("name", "source_filename", "created_by__username")
    readonly_fields = ("created_at",)
