import warnings
from types import MappingProxyType
from typing import Any, Callable, Optional

import structlog

Extractor = Callable[[Any], dict[str, Any]]


def _content_type_fields(content_type: Any) -> dict[str, Any]:
    return {"content_type": str(content_type)}


def _media_file_fields(media_file: Any) -> dict[str, Any]:
    return {
        "media_file_id": getattr(media_file, "pk", None),
        "media_file_name": getattr(media_file, "name", None),
    }


def _asset_fields(asset: Any) -> dict[str, Any]:
    return {
        "asset_filename": getattr(asset, "filename", None),
        "asset_mime_type": getattr(asset, "mime_type", None),
        "asset_size": getattr(asset, "size", None),
    }


#: Context keys which are expanded into flat fields on every logger
DEFAULT_EXTRACTORS: MappingProxyType = MappingProxyType(
    {
        "content_type": _content_type_fields,
        "media_file": _media_file_fields,
        "asset": _asset_fields,
    }
)

WARNING_LEVELS = ("warning", "error")


class CatalogLogger:
    """
    structlog wrapper which keeps the site's log records uniform.

    Every record has a message and an ``event_code``. Warnings and errors also
    carry a human readable ``reason`` and a machine readable ``reason_code``.

    Objects passed under a known key are expanded into flat fields:

    - ``content_type`` -> ``content_type``
    - ``media_file`` -> ``media_file_id``, ``media_file_name``
    - ``asset`` -> ``asset_filename``, ``asset_mime_type``, ``asset_size``

    Explicit keyword arguments take precedence over expanded and bound values,
    and fields whose value is None are left out.

    Usage::

        structured_logger = CatalogLogger.get_logger(__name__)

        structured_logger.warning(
            "Image download failed.",
            event_code="image_download_failed",
            reason="Remote server returned 404",
            reason_code="bad_status",
            url=url,
        )

        record_logger = structured_logger.bind(content_type="article", index=4)
        record_logger.info("Record created.", event_code="import_record_created")
    """

    def __init__(self, logger, context: Optional[dict[str, Any]] = None):
        self._logger = logger
        self._context = context or {}
        self._extractors: dict[str, Extractor] = dict(DEFAULT_EXTRACTORS)

    @classmethod
    def get_logger(cls, name: str) -> "CatalogLogger":
        """
        Return a CatalogLogger for the module ``name``.

        The underlying structlog logger is namespaced under ``structlog.`` so
        the ``LOGGING`` setting can route structured records separately.
        """
        return cls(structlog.get_logger(f"structlog.{name}"))

    def register_extractor(self, key: str, extractor: Extractor) -> None:
        """
        Expand ``key`` with ``extractor`` on this logger only.
        """
        if key in DEFAULT_EXTRACTORS:
            warnings.warn(
                f"Extractor for '{key}' overrides a default extractor for this "
                f"logger only.",
                UserWarning,
                stacklevel=2,
            )
        self._extractors[key] = extractor

    def unregister_extractor(self, key: str) -> None:
        self._extractors.pop(key, None)

    def _build_fields(self, context: dict[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for key, extractor in self._extractors.items():
            obj = context.pop(key, self._context.get(key))
            if obj is None:
                continue
            for name, value in extractor(obj).items():
                if value is not None:
                    fields.setdefault(name, value)

        for key, value in self._context.items():
            if key in self._extractors or key in context or value is None:
                continue
            fields[key] = value

        fields.update({k: v for k, v in context.items() if v is not None})
        return fields

    def log(
        self,
        level: str,
        message: str,
        *,
        event_code: str,
        reason: Optional[str] = None,
        reason_code: Optional[str] = None,
        **context: Any,
    ) -> None:
        """
        Emit one record at ``level``. Prefer the level methods.

        Raises:
            ValueError: If the message or ``event_code`` is missing, or a
                warning or error lacks ``reason`` or ``reason_code``.
        """
        if not message:
            raise ValueError("Log message is required.")
        if not event_code:
            raise ValueError("Structured logs must include an 'event_code' field.")
        if level in WARNING_LEVELS and not (reason and reason_code):
            raise ValueError(
                "Warnings and errors must include both 'reason' and 'reason_code'."
            )

        fields = {"event_code": event_code}
        if reason:
            fields["reason"] = reason
        if reason_code:
            fields["reason_code"] = reason_code
        for key, value in self._build_fields(context).items():
            fields.setdefault(key, value)

        getattr(self._logger, level)(message, **fields)

    def debug(self, message: str, *, event_code: str, **kwargs) -> None:
        self.log("debug", message, event_code=event_code, **kwargs)

    def info(self, message: str, *, event_code: str, **kwargs) -> None:
        self.log("info", message, event_code=event_code, **kwargs)

    def warning(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ) -> None:
        self.log(
            "warning",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def error(
        self, message: str, *, event_code: str, reason: str, reason_code: str, **kwargs
    ) -> None:
        self.log(
            "error",
            message,
            event_code=event_code,
            reason=reason,
            reason_code=reason_code,
            **kwargs,
        )

    def bind(self, **kwargs: Any) -> "CatalogLogger":
        """
        Return a copy of this logger with ``kwargs`` added to every record.
        """
        bound = CatalogLogger(self._logger, context={**self._context, **kwargs})
        bound._extractors = dict(self._extractors)
        return bound
