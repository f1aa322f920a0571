class ImageImportFailure(Exception):
    """
    Raised when an image import operation fails.

    This exception signals a failure while downloading or uploading an image
    found in a record. It never escapes the image pipeline: the resolver keeps
    the original value and the record is still imported. Callers should
    include a concise human-readable reason in the exception message.
    """

    def __init__(self, message, reason_code="image_failed"):
        super().__init__(message)
        self.reason_code = reason_code


class ImportPreconditionError(Exception):
    """
    Base class for failures which abort an import before any record is
    processed. Views translate these into client errors.
    """

    reason_code = "import_precondition_failed"


class InvalidImportRequest(ImportPreconditionError):
    reason_code = "invalid_request"


class UnknownContentType(ImportPreconditionError):
    reason_code = "unknown_content_type"


class ImportFileNotFound(ImportPreconditionError):
    reason_code = "file_not_found"


class InvalidImportFile(ImportPreconditionError):
    reason_code = "invalid_file"
