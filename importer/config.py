"""
Importer app level configurations
"""

import os

from django.conf import settings

from configuration.utils import configuration_value

IMPORTER_DEFAULTS = {
    "CONTENT_TYPES": {},
    "BATCH_SIZE": 50,
    "IMAGE_CONCURRENCY": 4,
    "MAX_IMAGE_SIZE": 10 * 1024 * 1024,
    "DOWNLOAD_TIMEOUT": 15,
    "UPLOAD_URL": "",
    "UPLOAD_TOKEN_ENV": "CATALOG_UPLOAD_TOKEN",
}

#: Upper bound on records in flight at once against the content store
MAX_BATCH_SIZE = 50


def importer_setting(name):
    return getattr(settings, "IMPORTER", {}).get(name, IMPORTER_DEFAULTS[name])


def get_upload_token():
    """
    Return the bearer token for the media upload endpoint, or None

    The environment variable named by ``IMPORTER["UPLOAD_TOKEN_ENV"]`` takes
    priority over the ``upload_token`` configuration value.
    """
    token = os.environ.get(importer_setting("UPLOAD_TOKEN_ENV"), "")
    if not token:
        token = configuration_value("upload_token", default="")
    return token or None


def get_batch_size():
    batch_size = configuration_value(
        "import_batch_size", default=importer_setting("BATCH_SIZE")
    )
    try:
        batch_size = int(batch_size)
    except (TypeError, ValueError):
        batch_size = importer_setting("BATCH_SIZE")
    return max(1, min(batch_size, MAX_BATCH_SIZE))
