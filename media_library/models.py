import os

from django.db import models

from catalog.storage import get_media_storage


def media_file_upload_path(instance, filename):
    return os.path.join("uploads", filename)


class MediaFile(models.Model):
    """
    A binary asset stored in the media library.

    Content types link to media files through ordinary relations, so the
    importer's ``{"connect": [id]}`` references resolve to rows of this table.
    """

    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    file = models.FileField(
        upload_to=media_file_upload_path, storage=get_media_storage, max_length=255
    )
    name = models.CharField(max_length=255)
    alternative_text = models.CharField(max_length=255, blank=True, default="")
    caption = models.CharField(max_length=255, blank=True, default="")

    mime_type = models.CharField(max_length=100)
    size = models.PositiveIntegerField(help_text="Size of the file in bytes")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ("-created",)

    def __str__(self):
        return self.name

    @property
    def url(self):
        if not self.file:
            return ""
        return self.file.url
