"""
Ingestion of binary assets into the media library
"""

import mimetypes
import os
from typing import Any, Optional

from django.core.files import File
from django.core.files.images import get_image_dimensions
from django.db import transaction

from catalog.logging import CatalogLogger

from .exceptions import MediaUploadError
from .models import MediaFile

structured_logger = CatalogLogger.get_logger(__name__)

RASTER_MIME_PREFIXES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/bmp",
)


def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or "application/octet-stream"


def upload_file(
    file: Any,
    file_info: Optional[dict[str, str]] = None,
    *,
    mime_type: Optional[str] = None,
) -> MediaFile:
    """
    Store a file in the media library and return the new MediaFile.

    Args:
        file: A Django File (including uploaded files) or an open binary file
            object with a ``name``.
        file_info: Optional metadata with ``name``, ``alternative_text`` and
            ``caption`` keys. ``name`` defaults to the filename without its
            extension.
        mime_type: Overrides the MIME type taken from the upload or guessed
            from the filename.

    Raises:
        MediaUploadError: If the file has no name or no content.
    """
    file_info = file_info or {}

    if not isinstance(file, File):
        file = File(file)

    filename = os.path.basename(file.name or "")
    if not filename:
        raise MediaUploadError("Uploaded file has no name")
    if not file.size:
        raise MediaUploadError(f"Uploaded file {filename} is empty")

    if not mime_type:
        mime_type = getattr(file, "content_type", None) or guess_mime_type(filename)

    width = height = None
    if mime_type.startswith(RASTER_MIME_PREFIXES):
        # Pillow only needs the header; get_image_dimensions rewinds the file
        width, height = get_image_dimensions(file)

    media_file = MediaFile(
        name=file_info.get("name") or os.path.splitext(filename)[0],
        alternative_text=file_info.get("alternative_text") or "",
        caption=file_info.get("caption") or "",
        mime_type=mime_type,
        size=file.size,
        width=width,
        height=height,
    )

    with transaction.atomic():
        file.seek(0)
        media_file.file.save(filename, file, save=False)
        media_file.save()

    structured_logger.info(
        "Stored media file.",
        event_code="media_file_stored",
        media_file=media_file,
        mime_type=mime_type,
        size=media_file.size,
    )
    return media_file


def serialize_media_file(media_file: MediaFile) -> dict[str, Any]:
    return {
        "id": media_file.pk,
        "name": media_file.name,
        "alternativeText": media_file.alternative_text,
        "caption": media_file.caption,
        "url": media_file.url,
        "mime": media_file.mime_type,
        "size": media_file.size,
        "width": media_file.width,
        "height": media_file.height,
    }
