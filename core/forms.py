"""Forms for core UI workflows.

- a spreadsheet upload form (parse + preview),
- a confirmation form naming the staged dataset,
- chart options for the visualization page.
"""

from __future__ import annotations

from django import forms
from django.conf import settings
from django.template.defaultfilters import filesizeformat

from core.charting.schema import CHART_KIND_LABELS, CHART_KINDS, DEFAULT_CHART_KIND, DEFAULT_CHART_TITLE
from core.parsers.spreadsheet import (
    INVALID_FILE_TYPE_MESSAGE,
    SUPPORTED_EXTENSIONS,
    SpreadsheetParseError,
    is_supported_file,
    parse_spreadsheet,
)
from datasets.models import Dataset


class SpreadsheetUploadForm(forms.Form):
    """Validate an uploaded spreadsheet and parse it for preview."""

    file = forms.FileField(
        label="Spreadsheet",
        help_text="Excel (.xlsx, .xls) or CSV files.",
        widget=forms.ClearableFileInput(attrs={"accept": ",".join(SUPPORTED_EXTENSIONS)}),
    )

    def clean_file(self):
        """Reject unsupported and oversized files before parsing."""

        uploaded = self.cleaned_data["file"]
        if not is_supported_file(uploaded.name):
            raise forms.ValidationError(INVALID_FILE_TYPE_MESSAGE)
        max_bytes = settings.CHARTDESK_MAX_UPLOAD_BYTES
        if uploaded.size is not None and uploaded.size > max_bytes:
            raise forms.ValidationError(f"File is too large (limit {filesizeformat(max_bytes)}).")
        return uploaded

    def clean(self) -> dict[str, object]:
        """Parse the uploaded file, exposing the result as `parsed`."""

        cleaned = super().clean()
        uploaded = cleaned.get("file")
        if uploaded is None:
            return cleaned
        try:
            cleaned["parsed"] = parse_spreadsheet(uploaded, filename=uploaded.name)
        except SpreadsheetParseError as exc:
            raise forms.ValidationError(str(exc)) from exc
        return cleaned


class DatasetConfirmForm(forms.Form):
    """Name a staged upload before saving it as a Dataset."""

    name = forms.CharField(
        required=False,
        max_length=200,
        label="Dataset name",
        help_text="Defaults to the file name without its extension.",
    )


class ChartOptionsForm(forms.Form):
    """Validate chart selections for the visualization page.

    Axis values that are not columns of the selected dataset are dropped so the
    dataset defaults apply; switching datasets therefore resets the axes.
    """

    dataset = forms.ModelChoiceField(
        required=False,
        queryset=Dataset.objects.none(),
        label="Dataset",
        empty_label=None,
    )
    title = forms.CharField(
        required=False,
        max_length=200,
        label="Chart Title",
        initial=DEFAULT_CHART_TITLE,
    )
    kind = forms.ChoiceField(
        required=False,
        choices=tuple((kind, CHART_KIND_LABELS[kind]) for kind in CHART_KINDS),
        label="Chart Type",
        initial=DEFAULT_CHART_KIND,
    )
    x_axis = forms.CharField(required=False, label="X-Axis")
    y_axis = forms.CharField(required=False, label="Y-Axis")

    def __init__(self, *args, **kwargs) -> None:
        """Scope the dataset choices to the requesting user."""

        user = kwargs.pop("user", None)
        super().__init__(*args, **kwargs)
        self.fields["dataset"].queryset = Dataset.objects.for_user(user)

    def clean(self) -> dict[str, object]:
        """Drop axes that do not belong to the selected dataset."""

        cleaned = super().clean()
        dataset: Dataset | None = cleaned.get("dataset")  # type: ignore[assignment]
        if dataset is None:
            return cleaned
        columns = list(dataset.columns)
        for field_name in ("x_axis", "y_axis"):
            value = (cleaned.get(field_name) or "").strip()
            cleaned[field_name] = value if value in columns else ""
        return cleaned
