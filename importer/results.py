from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class RecordError:
    index: int
    message: str

    def as_dict(self):
        return {"index": self.index, "message": self.message}


@dataclass
class ImportResult:
    """
    Summary of one import run

    ``errors`` holds one entry per failed record, ordered by the record's
    zero-based position in the submitted list.
    """

    content_type: str
    total_records: int
    successful: int = 0
    failed: int = 0
    errors: List[RecordError] = field(default_factory=list)
    processed_images: int = 0

    def record_success(self, resolved_images=0):
        self.successful += 1
        self.processed_images += resolved_images

    def record_failure(self, index, message):
        self.failed += 1
        self.errors.append(RecordError(index=index, message=message))

    def sort_errors(self):
        self.errors.sort(key=lambda error: error.index)

    def as_dict(self):
        return {
            "contentType": self.content_type,
            "totalRecords": self.total_records,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [error.as_dict() for error in self.errors],
            "processedImages": self.processed_images,
        }
