"""Views for dataset upload, dashboard and visualization pages."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import asdict, dataclass

from django.contrib import messages
from django.contrib.auth import login as auth_login
from django.contrib.auth.decorators import login_required
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm
from django.conf import settings
from django.forms import Form
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.text import slugify
from django.views.decorators.http import require_POST

from analysis.columns import column_profile, numeric_columns
from core.charting.builder import build_chart_config, download_filename
from core.charting.render import render_chart
from core.charting.schema import CHART_KIND_LABELS, CHART_KINDS, ChartConfig, RenderedChart
from core.forms import ChartOptionsForm, DatasetConfirmForm, SpreadsheetUploadForm
from core.redirects import safe_redirect
from core.selection import (
    clear_staged_upload,
    get_current_dataset,
    get_staged_upload,
    set_current_dataset,
    stage_upload,
)
from core.services import create_dataset, dashboard_stats, recent_datasets, remove_dataset
from core.parsers.spreadsheet import SpreadsheetParseError
from datasets.models import PREVIEW_ROW_LIMIT, Dataset

logger = logging.getLogger(__name__)

NO_STAGED_UPLOAD_MESSAGE = "No valid data to upload."


@dataclass(frozen=True, slots=True)
class ChartSelection:
    """Resolved visualization state for one request.

    Attributes:
        dataset: Selected dataset, or None when the user has none.
        form: Bound chart options form.
        config: ChartConfig derived from the selections.
        numeric_columns: Columns usable as the value axis.
        rendered: Rendered chart, or None when there is no dataset.
    """

    dataset: Dataset | None
    form: ChartOptionsForm
    config: ChartConfig | None
    numeric_columns: tuple[str, ...]
    rendered: RenderedChart | None


def login_view(request: HttpRequest) -> HttpResponse:
    """Render a combined sign-in + account creation page.

    This view replaces Django's default LoginView so new users can create an
    account directly from the sign-in page.
    """

    if request.user.is_authenticated:
        return redirect(settings.LOGIN_REDIRECT_URL)

    next_url = request.GET.get("next", "")
    login_form = AuthenticationForm(request)
    signup_form = UserCreationForm()

    if request.method == "POST":
        next_url = request.POST.get("next", next_url)
        if "signup_submit" in request.POST:
            signup_form = UserCreationForm(request.POST)
            if signup_form.is_valid():
                user = signup_form.save()
                auth_login(request, user)
                logger.info("Created account for user %s", user.pk)
                return safe_redirect(
                    request,
                    candidates=[request.POST.get("next"), request.GET.get("next")],
                    fallback=settings.LOGIN_REDIRECT_URL,
                )
        else:
            login_form = AuthenticationForm(request, data=request.POST)
            if login_form.is_valid():
                auth_login(request, login_form.get_user())
                return safe_redirect(
                    request,
                    candidates=[request.POST.get("next"), request.GET.get("next")],
                    fallback=settings.LOGIN_REDIRECT_URL,
                )

    return render(
        request,
        "registration/login.html",
        {
            "login_form": login_form,
            "signup_form": signup_form,
            "next": next_url,
        },
    )


@login_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """Render the landing dashboard with headline stats and recent datasets."""

    return render(
        request,
        "core/dashboard.html",
        {
            "stats": dashboard_stats(request.user),
            "recent_datasets": recent_datasets(request.user),
        },
    )


@login_required
def upload(request: HttpRequest) -> HttpResponse:
    """Upload a spreadsheet in two steps: preview, then confirm.

    POST actions:
    - `preview` (default): parse the file and stage it in the session.
    - `confirm`: save the staged upload as a Dataset and open it.
    - `clear`: drop the staged upload.
    """

    upload_form = SpreadsheetUploadForm()
    confirm_form: DatasetConfirmForm | None = None
    upload_error: str | None = None

    if request.method == "POST":
        action = (request.POST.get("action") or "preview").strip()
        if action == "clear":
            clear_staged_upload(request)
            return redirect("core:upload")

        if action == "confirm":
            staged = get_staged_upload(request)
            if staged is None:
                messages.error(request, NO_STAGED_UPLOAD_MESSAGE)
                return redirect("core:upload")
            confirm_form = DatasetConfirmForm(request.POST)
            if confirm_form.is_valid():
                try:
                    dataset = create_dataset(
                        user=request.user,
                        name=confirm_form.cleaned_data.get("name") or staged.suggested_name,
                        parsed=staged.parsed,
                        source_filename=staged.filename,
                    )
                except SpreadsheetParseError as exc:
                    clear_staged_upload(request)
                    messages.error(request, str(exc))
                    return redirect("core:upload")
                clear_staged_upload(request)
                set_current_dataset(request, dataset)
                messages.success(request, f"Dataset “{dataset.name}” uploaded.")
                return redirect("core:visualizations")
        else:
            upload_form = SpreadsheetUploadForm(request.POST, request.FILES)
            if upload_form.is_valid():
                uploaded = upload_form.cleaned_data["file"]
                stage_upload(request, upload_form.cleaned_data["parsed"], filename=uploaded.name)
                return redirect("core:upload")
            clear_staged_upload(request)
            upload_error = _first_form_error(upload_form)
            logger.info("Rejected upload for user %s: %s", request.user.pk, upload_error)

    staged = get_staged_upload(request)
    if staged is not None and confirm_form is None:
        confirm_form = DatasetConfirmForm(initial={"name": staged.suggested_name})

    context: dict[str, object] = {
        "upload_form": upload_form,
        "confirm_form": confirm_form,
        "upload_error": upload_error,
        "staged": staged,
    }
    if staged is not None:
        context.update(
            {
                "preview_columns": staged.parsed.columns,
                "preview_rows": _table_rows(staged.parsed.rows[:PREVIEW_ROW_LIMIT], staged.parsed.columns),
                "preview_total_rows": staged.parsed.row_count,
            }
        )
    return render(request, "core/upload.html", context)


@login_required
def visualizations(request: HttpRequest) -> HttpResponse:
    """Render the chart builder for the current dataset."""

    selection = _resolve_chart_selection(request)
    dataset = selection.dataset
    if dataset is None:
        return render(request, "core/visualizations.html", {"dataset": None, "form": selection.form})

    rendered = selection.rendered
    config = selection.config
    return render(
        request,
        "core/visualizations.html",
        {
            "dataset": dataset,
            "datasets": Dataset.objects.for_user(request.user),
            "form": selection.form,
            "config": config,
            "chart_kinds": tuple((kind, CHART_KIND_LABELS[kind]) for kind in CHART_KINDS),
            "numeric_columns": selection.numeric_columns,
            "column_profiles": column_profile(dataset.rows, dataset.columns),
            "chart_spec": rendered.spec if rendered is not None else None,
            "chart_error": rendered.error if rendered is not None else None,
            "chart_warnings": rendered.warnings if rendered is not None else (),
            "download_filename": download_filename(config.title) if config is not None else "",
            "preview_rows": _table_rows(dataset.preview_rows(), dataset.columns),
            "preview_limit": PREVIEW_ROW_LIMIT,
            "chart_js_url": settings.CHARTDESK_CHART_JS_URL,
        },
    )


@login_required
def chart_json(request: HttpRequest) -> JsonResponse:
    """Return the chart payload for the current selections as JSON."""

    selection = _resolve_chart_selection(request)
    if selection.dataset is None or selection.config is None or selection.rendered is None:
        return JsonResponse({"error": "No dataset selected."}, status=404)

    rendered = selection.rendered
    return JsonResponse(
        {
            "dataset": {"id": selection.dataset.pk, "name": selection.dataset.name},
            "config": asdict(selection.config),
            "numericColumns": list(selection.numeric_columns),
            "spec": rendered.spec,
            "error": rendered.error,
            "warnings": list(rendered.warnings),
            "downloadFilename": download_filename(selection.config.title),
        },
        status=200 if rendered.error is None else 400,
    )


@login_required
def history(request: HttpRequest) -> HttpResponse:
    """List every dataset the user has uploaded."""

    current = get_current_dataset(request)
    return render(
        request,
        "core/history.html",
        {
            "datasets": Dataset.objects.for_user(request.user),
            "current_dataset_id": current.pk if current is not None else None,
        },
    )


@login_required
@require_POST
def select_dataset(request: HttpRequest, dataset_id: int) -> HttpResponse:
    """Make a dataset the current selection and open the visualization page."""

    dataset = get_object_or_404(Dataset.objects.for_user(request.user), pk=dataset_id)
    set_current_dataset(request, dataset)
    return redirect("core:visualizations")


@login_required
@require_POST
def remove_dataset_view(request: HttpRequest, dataset_id: int) -> HttpResponse:
    """Delete a dataset, clearing the selection when it was selected."""

    if remove_dataset(request, dataset_id):
        messages.success(request, "Dataset removed.")
    else:
        messages.error(request, "Dataset not found.")
    return safe_redirect(
        request,
        candidates=[request.POST.get("next")],
        fallback="core:history",
    )


@login_required
def export_dataset_csv(request: HttpRequest, dataset_id: int) -> HttpResponse:
    """Download a dataset as CSV (columns in dataset order)."""

    dataset = get_object_or_404(Dataset.objects.for_user(request.user), pk=dataset_id)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(dataset.columns), extrasaction="ignore", restval="")
    writer.writeheader()
    for row in dataset.rows:
        writer.writerow(row)

    filename = f"{slugify(dataset.name) or 'dataset'}.csv"
    response = HttpResponse(buffer.getvalue(), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def _resolve_chart_selection(request: HttpRequest) -> ChartSelection:
    """Resolve dataset and chart options from the query string and session.

    The dataset comes from the query string when given, otherwise from the
    session, otherwise the user's first dataset. The resolved dataset becomes
    the session's current selection.
    """

    form = ChartOptionsForm(request.GET or None, user=request.user)
    cleaned: dict[str, object] = {}
    if form.is_bound:
        form.is_valid()
        cleaned = form.cleaned_data

    dataset: Dataset | None = cleaned.get("dataset")  # type: ignore[assignment]
    if dataset is None:
        dataset = get_current_dataset(request)
    if dataset is None:
        dataset = Dataset.objects.for_user(request.user).first()
    set_current_dataset(request, dataset)
    if dataset is None:
        return ChartSelection(dataset=None, form=form, config=None, numeric_columns=(), rendered=None)

    columns = list(dataset.columns)
    numeric = tuple(numeric_columns(dataset.rows, columns))
    x_axis, y_axis = (str(cleaned.get(name) or "").strip() for name in ("x_axis", "y_axis"))
    config = build_chart_config(
        columns=columns,
        kind=str(cleaned.get("kind") or ""),
        x_axis=x_axis if x_axis in columns else "",
        y_axis=y_axis if y_axis in columns else "",
        title=str(cleaned.get("title") or ""),
    )
    rendered = render_chart(config=config, rows=dataset.rows, columns=columns, numeric_columns=numeric)
    return ChartSelection(dataset=dataset, form=form, config=config, numeric_columns=numeric, rendered=rendered)


def _table_rows(rows: list[dict[str, object]], columns: tuple[str, ...] | list[str]) -> list[list[str]]:
    """Return preview cells in column order; missing cells render empty."""

    return [["" if row.get(column) is None else str(row.get(column)) for column in columns] for row in rows]


def _first_form_error(form: Form) -> str:
    """Return the first error message of a bound form."""

    for errors in form.errors.values():
        if errors:
            return str(errors[0])
    return "Failed to parse file."
