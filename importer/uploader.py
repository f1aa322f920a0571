"""
Storage of downloaded images in the media library

The media library's own ingestion service is tried first. If it is not
installed or raises, the file is posted to the site's public upload endpoint
instead, once. Either way the temporary copy of the image is removed before
returning.
"""

import json
import os
from dataclasses import dataclass
from tempfile import NamedTemporaryFile
from typing import Callable, Optional

import requests
from django.apps import apps
from django.core.files import File

from catalog.logging import CatalogLogger

from .config import get_upload_token, importer_setting
from .exceptions import ImageImportFailure
from .stores import close_thread_connections

structured_logger = CatalogLogger.get_logger(__name__)


@dataclass
class UploadedMedia:
    id: int
    name: str = ""
    url: str = ""


def build_file_info(asset, caption=None):
    return {
        "alternative_text": caption or asset.filename,
        "caption": caption or asset.filename,
        "name": caption or asset.stem,
    }


def default_primary_upload():
    if not apps.is_installed("media_library"):
        return None

    from media_library.services import upload_file

    return upload_file


class MediaUploader:
    def __init__(
        self,
        *,
        primary: Optional[Callable] = None,
        upload_url: Optional[str] = None,
        token_getter: Callable[[], Optional[str]] = get_upload_token,
        session=None,
        timeout: Optional[int] = None,
    ):
        self.primary = primary if primary is not None else default_primary_upload()
        self.upload_url = (
            upload_url if upload_url is not None else importer_setting("UPLOAD_URL")
        )
        self.token_getter = token_getter
        self.session = session
        self.timeout = timeout or importer_setting("DOWNLOAD_TIMEOUT")

    def upload(self, asset, caption=None) -> Optional[UploadedMedia]:
        """
        Store ``asset`` in the media library

        Returns:
            The uploaded media's id, name and URL, or None if both the primary
            and the fallback upload failed or the asset is incomplete.
        """
        if asset is None or not (asset.filename and asset.mime_type and asset.content):
            structured_logger.warning(
                "Refusing to upload an incomplete asset.",
                event_code="media_upload_skipped",
                reason="Asset is missing its filename, MIME type or content",
                reason_code="incomplete_asset",
                asset=asset,
            )
            return None

        file_info = build_file_info(asset, caption)
        suffix = os.path.splitext(asset.filename)[1]

        with NamedTemporaryFile(mode="w+b", suffix=suffix) as temp_file:
            temp_file.write(asset.content)
            temp_file.flush()

            if self.primary is not None:
                temp_file.seek(0)
                try:
                    media_file = self.primary(
                        File(temp_file, name=asset.filename),
                        file_info,
                        mime_type=asset.mime_type,
                    )
                except Exception as exc:
                    structured_logger.warning(
                        "Media library upload failed, trying the upload endpoint.",
                        event_code="media_upload_primary_failed",
                        reason=str(exc) or exc.__class__.__name__,
                        reason_code="primary_upload_failed",
                        asset=asset,
                    )
                else:
                    # The file is stored at this point and must not be posted again
                    return UploadedMedia(
                        id=media_file.pk, name=media_file.name, url=media_file.url
                    )

            temp_file.seek(0)
            try:
                return self.upload_over_http(temp_file, asset, file_info)
            except ImageImportFailure as exc:
                structured_logger.warning(
                    "Media upload failed.",
                    event_code="media_upload_failed",
                    reason=str(exc),
                    reason_code=exc.reason_code,
                    asset=asset,
                )
                return None

    def upload_over_http(self, file_obj, asset, file_info) -> UploadedMedia:
        if not self.upload_url:
            raise ImageImportFailure(
                "No upload endpoint is configured", "no_upload_endpoint"
            )

        headers = {}
        token = self.token_getter()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        http = self.session or requests
        try:
            resp = http.post(
                self.upload_url,
                files={"files": (asset.filename, file_obj, asset.mime_type)},
                data={
                    "fileInfo": json.dumps(
                        {
                            "alternativeText": file_info["alternative_text"],
                            "caption": file_info["caption"],
                            "name": file_info["name"],
                        }
                    )
                },
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise ImageImportFailure(
                f"Upload to {self.upload_url} failed: {exc}", "fallback_upload_failed"
            ) from exc
        except ValueError as exc:
            raise ImageImportFailure(
                f"Upload endpoint returned invalid JSON: {exc}", "invalid_response"
            ) from exc

        if isinstance(payload, list):
            payload = payload[0] if payload else None
        if not isinstance(payload, dict) or not payload.get("id"):
            raise ImageImportFailure(
                "Upload endpoint response did not include a media id",
                "invalid_response",
            )

        structured_logger.info(
            "Uploaded media through the upload endpoint.",
            event_code="media_uploaded_over_http",
            media_id=payload["id"],
            asset=asset,
        )
        return UploadedMedia(
            id=payload["id"],
            name=payload.get("name", ""),
            url=payload.get("url", ""),
        )


def upload_file_to_media_library(asset, caption=None):
    try:
        return MediaUploader().upload(asset, caption)
    finally:
        close_thread_connections()
