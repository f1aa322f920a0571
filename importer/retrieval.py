"""
Download of remote images referenced by imported records
"""

import mimetypes
import os
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlsplit

import requests

from catalog.logging import CatalogLogger

from .classifier import is_url
from .config import importer_setting
from .exceptions import ImageImportFailure

structured_logger = CatalogLogger.get_logger(__name__)

# Missing from the built-in table before Python 3.11
mimetypes.add_type("image/webp", ".webp")

DEFAULT_EXTENSION = ".jpg"
DEFAULT_MIME_TYPE = "image/jpeg"
# Bounds how far a slow body can overrun the download deadline
CHUNK_SIZE = 8 * 1024


@dataclass
class AssetDescriptor:
    """
    An image held in memory between download and upload
    """

    content: bytes = field(repr=False)
    filename: str
    mime_type: str
    size: int

    @property
    def stem(self):
        return os.path.splitext(self.filename)[0]


def guess_image_type(url):
    """
    Return ``(extension, mime_type)`` for an image URL from its path
    """
    extension = os.path.splitext(urlsplit(url).path)[1].lower() or DEFAULT_EXTENSION
    mime_type, _ = mimetypes.guess_type(f"image{extension}")
    mime_type = mime_type or DEFAULT_MIME_TYPE
    return extension, mime_type


def fetch_image(url, *, session=None):
    """
    Download ``url`` and return an AssetDescriptor

    Raises:
        ImageImportFailure: For any rejected or failed download. The
            exception's ``reason_code`` says which check failed.
    """
    if not isinstance(url, str) or not is_url(url):
        raise ImageImportFailure(f"Not a valid URL: {url!r}", "invalid_url")

    max_size = importer_setting("MAX_IMAGE_SIZE")
    timeout = importer_setting("DOWNLOAD_TIMEOUT")
    http = session or requests

    deadline = time.monotonic() + timeout
    try:
        resp = http.get(url, stream=True, timeout=timeout)
        try:
            if resp.status_code != 200:
                raise ImageImportFailure(
                    f"Unexpected HTTP status {resp.status_code} for {url}",
                    "bad_status",
                )

            content_type = resp.headers.get("Content-Type")
            if content_type and not content_type.lower().startswith("image/"):
                raise ImageImportFailure(
                    f"{url} has content type {content_type}, not an image",
                    "not_an_image",
                )

            declared_length = resp.headers.get("Content-Length")
            if declared_length and declared_length.isdigit():
                if int(declared_length) > max_size:
                    raise ImageImportFailure(
                        f"{url} is {declared_length} bytes, more than the "
                        f"{max_size} byte limit",
                        "too_large",
                    )

            content = bytearray()
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                content.extend(chunk)
                if len(content) > max_size:
                    raise ImageImportFailure(
                        f"{url} exceeded the {max_size} byte limit", "too_large"
                    )
                if time.monotonic() > deadline:
                    raise ImageImportFailure(
                        f"Downloading {url} took longer than {timeout} seconds",
                        "timeout",
                    )
        finally:
            resp.close()
    except requests.Timeout as exc:
        raise ImageImportFailure(
            f"Downloading {url} took longer than {timeout} seconds", "timeout"
        ) from exc
    except requests.RequestException as exc:
        raise ImageImportFailure(
            f"Unable to download {url}: {exc}", "transport_error"
        ) from exc

    if not content:
        raise ImageImportFailure(f"{url} returned an empty body", "empty_response")

    extension, mime_type = guess_image_type(url)
    return AssetDescriptor(
        content=bytes(content),
        filename=f"{uuid.uuid4().hex}{extension}",
        mime_type=mime_type,
        size=len(content),
    )


def download_image(url, *, session=None) -> Optional[AssetDescriptor]:
    """
    Download an image, returning None instead of raising on any failure
    """
    try:
        asset = fetch_image(url, session=session)
    except ImageImportFailure as exc:
        structured_logger.warning(
            "Image download failed.",
            event_code="image_download_failed",
            reason=str(exc),
            reason_code=exc.reason_code,
            url=url if isinstance(url, str) else repr(url),
        )
        return None

    structured_logger.debug(
        "Downloaded image.",
        event_code="image_downloaded",
        url=url,
        asset=asset,
    )
    return asset
