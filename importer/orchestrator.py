"""
Batched import of JSON records into a content store

Records are processed in contiguous batches of at most ``batch_size``. The
batches run one after the other; the records of a batch run concurrently on a
thread pool sized to the batch. Each record has its images resolved, is
sanitized and is then handed to the content store. A record that fails for
any reason is counted and reported by its position in the input without
affecting any other record.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from catalog.logging import CatalogLogger

from .config import MAX_BATCH_SIZE, get_batch_size
from .exceptions import (
    ImportFileNotFound,
    InvalidImportFile,
    InvalidImportRequest,
    UnknownContentType,
)
from .resolver import ImageResolver
from .results import ImportResult
from .sanitizer import sanitize_record_before_create
from .stores import DjangoContentStore

structured_logger = CatalogLogger.get_logger(__name__)

UNKNOWN_ERROR = "Unknown error"


def batched(records, batch_size):
    """
    Yield ``(offset, batch)`` pairs of contiguous slices of ``records``
    """
    for offset in range(0, len(records), batch_size):
        yield offset, records[offset : offset + batch_size]


def error_message(exc):
    message = str(exc).strip()
    return message or UNKNOWN_ERROR


class Importer:
    def __init__(self, content_store, resolver, batch_size=MAX_BATCH_SIZE):
        if not isinstance(batch_size, int) or not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(
                f"batch_size must be between 1 and {MAX_BATCH_SIZE}, "
                f"not {batch_size!r}"
            )
        self.content_store = content_store
        self.resolver = resolver
        self.batch_size = batch_size

    def import_data(self, content_type_id, records):
        """
        Import ``records`` as entries of ``content_type_id``

        Raises:
            InvalidImportRequest: The content type id is empty or ``records``
                is not a list.
            UnknownContentType: The content store does not know the type.

        Returns:
            An ImportResult. Individual record failures never raise.
        """
        if not content_type_id or not isinstance(records, list):
            raise InvalidImportRequest(
                "Invalid parameters: contentType and data array are required"
            )
        if not self.content_store.has_content_type(content_type_id):
            raise UnknownContentType(f'Content type "{content_type_id}" not found')

        result = ImportResult(content_type=content_type_id, total_records=len(records))
        import_logger = structured_logger.bind(content_type=content_type_id)

        import_logger.info(
            "Starting import.",
            event_code="import_started",
            total_records=len(records),
            batch_size=self.batch_size,
        )

        for offset, batch in batched(records, self.batch_size):
            outcomes = self.run_batch(content_type_id, offset, batch)

            for index, resolved_images, message in outcomes:
                if message is None:
                    result.record_success(resolved_images)
                else:
                    result.record_failure(index, message)

            import_logger.debug(
                "Finished import batch.",
                event_code="import_batch_finished",
                batch_start=offset,
                batch_length=len(batch),
            )

        result.sort_errors()

        import_logger.info(
            "Finished import.",
            event_code="import_finished",
            total_records=result.total_records,
            successful=result.successful,
            failed=result.failed,
            processed_images=result.processed_images,
        )
        return result

    def run_batch(self, content_type_id, offset, batch):
        """
        Process one batch concurrently and return its outcomes

        Each outcome is ``(index, resolved_images, error_message)`` with
        ``error_message`` None for a record which was created.
        """
        with ThreadPoolExecutor(
            max_workers=len(batch), thread_name_prefix="importer"
        ) as executor:
            futures = [
                executor.submit(self.import_record, content_type_id, offset + i, record)
                for i, record in enumerate(batch)
            ]

        return [future.result() for future in futures]

    def import_record(self, content_type_id, index, record):
        try:
            resolved, resolved_images = self.resolver.resolve(record)
            data = sanitize_record_before_create(resolved)
            self.content_store.create(content_type_id, data)
        except Exception as exc:
            message = error_message(exc)
            structured_logger.warning(
                "Failed to import record.",
                event_code="import_record_failed",
                reason=message,
                reason_code="record_failed",
                content_type=content_type_id,
                index=index,
            )
            return index, 0, message

        return index, resolved_images, None

    def import_from_file(self, content_type_id, path):
        """
        Import the JSON array stored in the file at ``path``

        Raises:
            ImportFileNotFound: Nothing exists at ``path``.
            InvalidImportFile: The file can't be read, is not UTF-8 encoded
                JSON or does not hold an array.
        """
        path = Path(path)
        try:
            records = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ImportFileNotFound(f"File not found: {path}") from exc
        except OSError as exc:
            raise InvalidImportFile(
                f"Unable to read file {path}: {exc.strerror or exc}"
            ) from exc
        except UnicodeDecodeError as exc:
            raise InvalidImportFile(f"File is not valid UTF-8: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise InvalidImportFile(f"Invalid JSON file: {exc}") from exc

        if not isinstance(records, list):
            raise InvalidImportFile("File content must be a JSON array")

        structured_logger.info(
            "Importing records from file.",
            event_code="import_file_loaded",
            content_type=content_type_id,
            path=str(path),
            records_count=len(records),
        )
        return self.import_data(content_type_id, records)


def get_importer(batch_size=None):
    """
    Return an Importer wired to the Django content store and media library
    """
    return Importer(
        content_store=DjangoContentStore(),
        resolver=ImageResolver(),
        batch_size=batch_size or get_batch_size(),
    )


def import_data(content_type_id, records):
    return get_importer().import_data(content_type_id, records)


def import_from_file(content_type_id, path):
    return get_importer().import_from_file(content_type_id, path)
