"""
Heuristics for spotting image URLs in imported data

Classification only looks at the URL's path extension, never at the remote
content, so URLs without an extension are not treated as images.
"""

from urllib.parse import urlsplit

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".bmp")


def is_url(value):
    if not isinstance(value, str) or not value:
        return False
    if any(c.isspace() for c in value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # NOQA: B018 raises ValueError for a malformed port
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def is_image_url(value):
    if not is_url(value):
        return False
    return urlsplit(value).path.lower().endswith(IMAGE_EXTENSIONS)
