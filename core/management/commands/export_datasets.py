"""Export datasets to a JSON file (or stdout)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from core.dataset_codec import encode_datasets
from datasets.models import Dataset

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Write datasets as a JSON export document."""

    help = "Export datasets (optionally for one user) as JSON with ISO-8601 timestamps."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "--user",
            default=None,
            help="Only export datasets created by this username.",
        )
        parser.add_argument(
            "--output",
            default=None,
            help="File path to write; defaults to stdout.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        username: str | None = options["user"]
        output: str | None = options["output"]

        queryset = Dataset.objects.select_related("created_by").order_by("created_at", "id")
        if username:
            user = get_user_model().objects.filter(username=username).first()
            if user is None:
                raise CommandError(f"Unknown user: {username!r}.")
            queryset = queryset.filter(created_by=user)

        document = encode_datasets(queryset)
        text = json.dumps(document, indent=2)
        count = len(document["datasets"])
        if output is None:
            self.stdout.write(text)
            return None

        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info("Exported %d datasets to %s", count, output)
        self.stdout.write(self.style.SUCCESS(f"Exported {count} datasets to {output}."))
        return None
