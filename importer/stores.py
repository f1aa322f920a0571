"""
Content stores the importer persists records into
"""

import threading

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist
from django.db import connections, transaction

from catalog.logging import CatalogLogger

from .config import importer_setting

structured_logger = CatalogLogger.get_logger(__name__)


def close_thread_connections():
    """
    Close the database connections opened by the current worker thread

    Django keeps one connection per thread and never reuses those of pool
    threads. The main thread is left alone.
    """
    if threading.current_thread() is not threading.main_thread():
        connections.close_all()


class ContentStore:
    """
    Interface between the import pipeline and whatever holds the records

    ``create`` is called concurrently from worker threads, one record per
    call. It should raise with a readable message when the record is rejected.
    """

    def has_content_type(self, content_type_id):
        raise NotImplementedError

    def create(self, content_type_id, data):
        raise NotImplementedError


def is_media_reference(value):
    return (
        isinstance(value, dict)
        and set(value) == {"connect"}
        and isinstance(value["connect"], list)
    )


def related_id(field_name, value):
    if value is None:
        return None
    if is_media_reference(value):
        return value["connect"][0]
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return value
    raise ValueError(f"Invalid value for relation {field_name!r}: {value!r}")


def related_ids(field_name, value):
    if is_media_reference(value):
        return list(value["connect"])
    if not isinstance(value, list):
        raise ValueError(f"Invalid value for relation {field_name!r}: {value!r}")

    ids = []
    for item in value:
        if is_media_reference(item):
            ids.extend(item["connect"])
        else:
            ids.append(related_id(field_name, item))
    return ids


class DjangoContentStore(ContentStore):
    """
    Persists records as Django model instances

    Importable content types are the keys of ``IMPORTER["CONTENT_TYPES"]``,
    each mapped to an ``app_label.ModelName``. Record keys must name model
    fields; relations accept media references, raw primary keys or lists of
    them.
    """

    def __init__(self, content_types=None):
        if content_types is None:
            content_types = importer_setting("CONTENT_TYPES")
        self.content_types = dict(content_types)

    def get_model(self, content_type_id):
        label = self.content_types.get(content_type_id)
        if not label:
            raise LookupError(f'Content type "{content_type_id}" not found')
        return apps.get_model(label)

    def has_content_type(self, content_type_id):
        try:
            self.get_model(content_type_id)
        except (LookupError, ValueError):
            return False
        return True

    def create(self, content_type_id, data):
        try:
            return self.create_instance(content_type_id, data)
        finally:
            close_thread_connections()

    def create_instance(self, content_type_id, data):
        if not isinstance(data, dict):
            raise ValueError("Record must be a JSON object")

        model = self.get_model(content_type_id)
        instance = model()
        many_to_many = {}

        for key, value in data.items():
            try:
                field = model._meta.get_field(key)
            except FieldDoesNotExist:
                raise ValueError(
                    f"Unknown field {key!r} for content type {content_type_id!r}"
                ) from None

            if field.auto_created and not field.concrete:
                raise ValueError(
                    f"Unknown field {key!r} for content type {content_type_id!r}"
                )

            if field.many_to_many:
                many_to_many[field] = related_ids(key, value)
            elif field.many_to_one:
                setattr(instance, field.attname, related_id(key, value))
            else:
                setattr(instance, field.attname, value)

        with transaction.atomic():
            instance.full_clean()
            instance.save()
            for field, ids in many_to_many.items():
                self.check_related_ids(field, ids)
                getattr(instance, field.name).set(ids)

        structured_logger.info(
            "Created imported record.",
            event_code="import_record_created",
            content_type=content_type_id,
            object_id=instance.pk,
        )
        return instance

    def check_related_ids(self, field, ids):
        unique_ids = set(ids)
        found = field.related_model._default_manager.filter(pk__in=unique_ids).count()
        if found != len(unique_ids):
            raise ValueError(
                f"Unknown {field.related_model._meta.verbose_name} id in "
                f"{field.name!r}: {sorted(unique_ids, key=str)}"
            )
