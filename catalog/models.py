"""
Content types which can be populated by the importer

Each model is registered under a short identifier in
``settings.IMPORTER["CONTENT_TYPES"]``. Media fields are ordinary relations to
``media_library.MediaFile`` so that imported ``{"connect": [id]}`` references
can be assigned directly.
"""

from django.db import models


class Article(models.Model):
    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, blank=True, default="")
    body = models.TextField(blank=True, default="")
    author = models.CharField(max_length=255, blank=True, default="")
    published = models.BooleanField(default=False)
    metadata = models.JSONField(default=dict, blank=True)

    image = models.ForeignKey(
        "media_library.MediaFile",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    gallery = models.ManyToManyField(
        "media_library.MediaFile", blank=True, related_name="+"
    )

    def __str__(self):
        return self.title


class Product(models.Model):
    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=100, blank=True, default="")
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    attributes = models.JSONField(default=dict, blank=True)

    thumbnail = models.ForeignKey(
        "media_library.MediaFile",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    photos = models.ManyToManyField(
        "media_library.MediaFile", blank=True, related_name="+"
    )

    def __str__(self):
        return self.name
