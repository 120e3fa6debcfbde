"""Import datasets from a JSON export file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.dataset_codec import decode_datasets
from datasets.models import Dataset

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Create datasets from an export document, owned by one user."""

    help = "Import datasets from a JSON export; timestamps are restored from the file."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Path to a JSON export produced by export_datasets.")
        parser.add_argument(
            "--user",
            required=True,
            help="Username that will own the imported datasets.",
        )
        parser.add_argument(
            "--check",
            action="store_true",
            help="Dry-run: validate the file and report what would be imported.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path = Path(options["path"])
        username: str = options["user"]
        check: bool = options["check"]

        user = get_user_model().objects.filter(username=username).first()
        if user is None:
            raise CommandError(f"Unknown user: {username!r}.")

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Could not read {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"{path} is not valid JSON: {exc}") from exc

        try:
            decoded = decode_datasets(payload)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        mode = "CHECK" if check else "IMPORT"
        self.stdout.write(f"[{mode}] datasets={len(decoded)} user={username}")
        if check:
            return None

        with transaction.atomic():
            for entry in decoded:
                dataset = Dataset.objects.create(
                    name=entry.name,
                    columns=list(entry.columns),
                    rows=entry.rows,
                    created_by=user,
                )
                Dataset.objects.filter(pk=dataset.pk).update(created_at=entry.created_at)

        logger.info("Imported %d datasets from %s for user %s", len(decoded), path, user.pk)
        self.stdout.write(self.style.SUCCESS(f"Imported {len(decoded)} datasets."))
        return None
