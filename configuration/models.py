import json

from django.db import models


def _to_number(value):
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass
    return 0


def _to_boolean(value):
    return value.strip().lower() == "true"


class Configuration(models.Model):
    """
    A runtime setting editable through the admin

    Values are stored as text and cast according to ``data_type`` when read.
    """

    class DataType(models.TextChoices):
        TEXT = "text", "Plain text"
        SECRET = "secret", "Secret text"
        NUMBER = "number", "Number"
        BOOLEAN = "boolean", "Boolean"
        JSON = "json", "JSON"

    key = models.CharField(
        max_length=255, unique=True, help_text="Name used to look the setting up"
    )
    data_type = models.CharField(
        max_length=10,
        choices=DataType.choices,
        default=DataType.TEXT,
        help_text="How the stored text is interpreted",
    )
    value = models.TextField(
        blank=True, help_text="Stored value, cast according to the data type"
    )
    description = models.TextField(blank=True, help_text="What the setting controls")

    def __str__(self):
        return self.key

    def get_value(self):
        """
        Return the value cast to ``data_type``

        Numbers which do not parse become 0. Invalid JSON raises
        json.JSONDecodeError.
        """
        casts = {
            self.DataType.NUMBER: _to_number,
            self.DataType.BOOLEAN: _to_boolean,
            self.DataType.JSON: json.loads,
        }
        cast = casts.get(self.data_type)
        if cast is None:
            return self.value
        return cast(self.value)

    def get_display_value(self):
        if self.data_type == self.DataType.SECRET and self.value:
            return "********"
        return self.value
