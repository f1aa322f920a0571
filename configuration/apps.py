from django.apps.config import AppConfig


class ConfigurationConfig(AppConfig):
    name = "configuration"

    def ready(self):
        from . import signals  # NOQA
