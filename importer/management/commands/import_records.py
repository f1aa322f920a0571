"""
Import a JSON array of records from a file into a content type.

Usage:
    python manage.py import_records article path/to/articles.json
    python manage.py import_records product products.json --batch-size 10

Arguments:
    content_type  Key of the content type in IMPORTER["CONTENT_TYPES"].
    path          Path to a UTF-8 JSON file holding an array of records.
    --batch-size  Records processed concurrently (1 to 50). Defaults to the
                  import_batch_size configuration value.

Image URLs in the records are stored in the media library as they are
imported. Failed records are listed with their position in the file and do
not stop the import.
"""

from argparse import ArgumentParser

from django.core.management.base import BaseCommand, CommandError

from importer.config import MAX_BATCH_SIZE
from importer.exceptions import ImportPreconditionError
from importer.orchestrator import get_importer


class Command(BaseCommand):
    help = "Import a JSON array of records into a content type"  # NOQA: A003

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument("content_type", help="Content type to import into")
        parser.add_argument("path", help="Path to a JSON file holding an array")
        parser.add_argument(
            "--batch-size",
            type=int,
            default=None,
            help=f"Records imported concurrently (1 to {MAX_BATCH_SIZE})",
        )

    def handle(
        self, *, content_type: str, path: str, batch_size=None, **options
    ) -> None:
        if batch_size is not None and not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise CommandError(f"--batch-size must be between 1 and {MAX_BATCH_SIZE}")

        importer = get_importer(batch_size=batch_size)
        try:
            result = importer.import_from_file(content_type, path)
        except ImportPreconditionError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            f"Imported {result.successful} of {result.total_records} "
            f"{content_type} records ({result.failed} failed, "
            f"{result.processed_images} images stored)"
        )
        for error in result.errors:
            self.stderr.write(f"Record {error.index}: {error.message}")

        if result.failed:
            self.stdout.write(self.style.WARNING("Import finished with errors"))
        else:
            self.stdout.write(self.style.SUCCESS("Import finished"))
