"""
Replacement of image URLs inside arbitrary JSON with media references

Records are walked depth-first. Every image leaf found is downloaded and
uploaded on a thread pool while the walk continues, and the placeholders left
in the copied structure are swapped for their results once every upload has
finished. A failed image leaves the original value in place.
"""

from concurrent.futures import ThreadPoolExecutor

from catalog.logging import CatalogLogger

from .classifier import is_image_url
from .config import importer_setting
from .retrieval import download_image
from .uploader import upload_file_to_media_library

structured_logger = CatalogLogger.get_logger(__name__)

#: Keys checked, in order, for an upload caption on ``{"url": ...}`` objects
CAPTION_KEYS = ("caption", "alt", "name")


def media_reference(media_id):
    return {"connect": [media_id]}


def caption_hint(value):
    for key in CAPTION_KEYS:
        caption = value.get(key)
        if caption and isinstance(caption, str):
            return caption
    return None


def is_image_object(value):
    return isinstance(value, dict) and is_image_url(value.get("url"))


class PendingImage:
    __slots__ = ("future", "original")

    def __init__(self, future, original):
        self.future = future
        self.original = original


class ImageResolver:
    def __init__(self, *, download=None, upload=None, max_workers=None):
        self.download = download or download_image
        self.upload = upload or upload_file_to_media_library
        self.max_workers = max_workers or importer_setting("IMAGE_CONCURRENCY")

    def process_object_for_images(self, value):
        resolved, _ = self.resolve(value)
        return resolved

    def resolve(self, value):
        """
        Return ``(copy_of_value, resolved_image_count)``

        The input is never modified. This only returns once every image found
        in ``value`` has either been uploaded or given up on.
        """
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="image-resolver"
        ) as executor:
            scheduled = self._schedule(value, executor)

        resolved_count = 0

        def collect(node):
            nonlocal resolved_count
            if isinstance(node, PendingImage):
                reference = node.future.result()
                if reference is None:
                    return node.original
                resolved_count += 1
                return reference
            if isinstance(node, list):
                return [collect(item) for item in node]
            if isinstance(node, dict):
                return {key: collect(item) for key, item in node.items()}
            return node

        return collect(scheduled), resolved_count

    def _schedule(self, value, executor):
        if isinstance(value, str):
            if is_image_url(value):
                return PendingImage(
                    executor.submit(self.resolve_image, value), value
                )
            return value

        if isinstance(value, list):
            return [self._schedule(item, executor) for item in value]

        if isinstance(value, dict):
            result = {}
            for key, item in value.items():
                if is_image_object(item):
                    result[key] = PendingImage(
                        executor.submit(
                            self.resolve_image, item["url"], caption_hint(item)
                        ),
                        item,
                    )
                else:
                    result[key] = self._schedule(item, executor)
            return result

        return value

    def resolve_image(self, url, caption=None):
        """
        Download and upload one image, returning its media reference or None
        """
        try:
            asset = self.download(url)
            if asset is None:
                return None

            uploaded = self.upload(asset, caption)
        except Exception as exc:
            structured_logger.warning(
                "Image processing raised, keeping the original value.",
                event_code="image_resolution_error",
                reason=str(exc) or exc.__class__.__name__,
                reason_code="unexpected_error",
                url=url,
            )
            return None

        if uploaded is None:
            structured_logger.warning(
                "Image could not be uploaded, keeping the original value.",
                event_code="image_upload_failed",
                reason="Both media upload paths failed",
                reason_code="upload_failed",
                url=url,
            )
            return None

        structured_logger.info(
            "Processed image URL into media reference.",
            event_code="image_resolved",
            url=url,
            media_id=uploaded.id,
        )
        return media_reference(uploaded.id)


def process_object_for_images(value):
    return ImageResolver().process_object_for_images(value)
