import logging
import os
from typing import Any, MutableMapping, Optional


DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | user=%(user_id)s deck=%(deck_id)s | %(message)s"
)

_CONTEXT_FIELDS = ("user_id", "deck_id")


class ContextFilter(logging.Filter):
    """Fills missing context fields with '-' so the formatter never raises KeyError."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for field in _CONTEXT_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with a fixed request context.

    Per-call ``extra`` values win over the bound context, so a deck id learned
    halfway through a request can still be attached to a single line.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Initialize root logger with a sane formatter and context filter."""
    resolved_level = getattr(logging, (level or DEFAULT_LEVEL), logging.INFO)
    formatter = logging.Formatter(fmt or DEFAULT_FORMAT)

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Clear existing handlers to avoid duplicate logs in reloads
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger; ensure root is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def get_context_logger(name: str, **context: Any) -> ContextAdapter:
    """Module logger bound to request context such as ``user_id``."""
    return ContextAdapter(get_logger(name), context)
