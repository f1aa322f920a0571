import catalog.storage
import media_library.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MediaFile",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                ("modified", models.DateTimeField(auto_now=True)),
                (
                    "file",
                    models.FileField(
                        max_length=255,
                        storage=catalog.storage.get_media_storage,
                        upload_to=media_library.models.media_file_upload_path,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "alternative_text",
                    models.CharField(blank=True, default="", max_length=255),
                ),
                ("caption", models.CharField(blank=True, default="", max_length=255)),
                ("mime_type", models.CharField(max_length=100)),
                (
                    "size",
                    models.PositiveIntegerField(help_text="Size of the file in bytes"),
                ),
                ("width", models.PositiveIntegerField(blank=True, null=True)),
                ("height", models.PositiveIntegerField(blank=True, null=True)),
            ],
            options={
                "ordering": ("-created",),
            },
        ),
    ]
