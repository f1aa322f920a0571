from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from configuration.models import Configuration
from configuration.utils import cache_configuration_value, clear_configuration_value


@receiver(post_save, sender=Configuration)
def refresh_cached_value(sender, *, instance, **kwargs):
    try:
        value = instance.get_value()
    except ValueError:
        # Invalid JSON: the next read hits the database and raises there
        clear_configuration_value(instance.key)
    else:
        cache_configuration_value(instance.key, value)


@receiver(post_delete, sender=Configuration)
def drop_cached_value(sender, *, instance, **kwargs):
    clear_configuration_value(instance.key)
