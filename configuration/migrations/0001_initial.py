from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Configuration",
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
                (
                    "key",
                    models.CharField(
                        help_text="Name used to look the setting up",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "data_type",
                    models.CharField(
                        choices=[
                            ("text", "Plain text"),
                            ("secret", "Secret text"),
                            ("number", "Number"),
                            ("boolean", "Boolean"),
                            ("json", "JSON"),
                        ],
                        default="text",
                        help_text="How the stored text is interpreted",
                        max_length=10,
                    ),
                ),
                (
                    "value",
                    models.TextField(
                        blank=True,
                        help_text="Stored value, cast according to the data type",
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True, help_text="What the setting controls"
                    ),
                ),
            ],
        ),
    ]
