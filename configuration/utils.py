from typing import Any

from django.conf import settings
from django.core.cache import caches

from configuration.models import Configuration

CONFIGURATION_KEY_PREFIX = "config"

_MISSING = object()


def _cache():
    return caches["configuration_cache"]


def _cache_key(key: str) -> str:
    return f"{CONFIGURATION_KEY_PREFIX}_{key}"


def configuration_value(key: str, default: Any = _MISSING) -> Any:
    """
    Return the typed value of the Configuration row ``key``.

    Values are served from the ``configuration_cache`` cache and loaded from
    the database on a miss. When there is no row for ``key`` the ``default``
    is returned, and is not cached, so a row created later is picked up.

    Raises:
        Configuration.DoesNotExist: No row exists and no default was given.
        json.JSONDecodeError: The row is a JSON setting with an invalid value.
    """
    value = _cache().get(_cache_key(key))
    if value is not None:
        return value

    try:
        return cache_configuration_value(key)
    except Configuration.DoesNotExist:
        if default is _MISSING:
            raise
        return default


def cache_configuration_value(key: str, value: Any | None = None) -> Any:
    """
    Store ``value`` (or, when None, the row's current typed value) in the
    cache for ``settings.CONFIGURATION_CACHE_TIMEOUT`` seconds and return it.
    """
    if value is None:
        value = Configuration.objects.get(key=key).get_value()

    _cache().set(_cache_key(key), value, timeout=settings.CONFIGURATION_CACHE_TIMEOUT)
    return value


def clear_configuration_value(key: str) -> None:
    _cache().delete(_cache_key(key))
