"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("upload/", views.upload, name="upload"),
    path("visualizations/", views.visualizations, name="visualizations"),
    path("visualizations/chart.json", views.chart_json, name="chart_json"),
    path("datasets/", views.history, name="history"),
    path("datasets/<int:dataset_id>/select/", views.select_dataset, name="select_dataset"),
    path("datasets/<int:dataset_id>/remove/", views.remove_dataset_view, name="remove_dataset"),
    path("datasets/<int:dataset_id>/export.csv", views.export_dataset_csv, name="export_dataset_csv"),
]
