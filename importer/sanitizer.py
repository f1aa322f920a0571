def is_broken_media_reference(value):
    """
    True for ``{"connect": [...]}`` values that must not reach the content
    store: the list is empty or holds a falsy id
    """
    if not isinstance(value, dict) or "connect" not in value:
        return False
    connect = value["connect"]
    if not isinstance(connect, list):
        return False
    return not connect or not all(connect)


def sanitize_record_before_create(value):
    """
    Return a copy of ``value`` with broken media references removed

    Keys holding a broken reference are dropped entirely; everything else is
    copied as is, at any depth.
    """
    if isinstance(value, list):
        return [sanitize_record_before_create(item) for item in value]

    if isinstance(value, dict):
        return {
            key: sanitize_record_before_create(item)
            for key, item in value.items()
            if not is_broken_media_reference(item)
        }

    return value
