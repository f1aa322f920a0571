from django.core.files.storage import storages


def get_media_storage():
    # Passed to FileField as a callable so the storage isn't evaluated when
    # the code is loaded, which is needed to override the setting during tests
    return storages["media"]
