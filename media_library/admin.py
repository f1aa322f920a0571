from django.contrib import admin

from media_library.models import MediaFile


@admin.register(MediaFile)
class MediaFileAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "mime_type", "size", "width", "height", "created")
    list_filter = ("mime_type",)
    search_fields = ("name", "caption", "alternative_text")
    readonly_fields = ("created", "modified", "size", "width", "height", "mime_type")
