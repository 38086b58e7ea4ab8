"""Structured logging for the mealplanner service.

Log lines carry the id of the HTTP request and of the recipe being imported,
taken from context variables so nothing has to be threaded through calls.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar, Token
from datetime import UTC, datetime
from typing import Any

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
recipe_id_ctx: ContextVar[str | None] = ContextVar("recipe_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "recipe_id": recipe_id_ctx,
}

# Short labels used by the text formatter
_TEXT_LABELS = {"request_id": "req", "recipe_id": "recipe"}


def current_context() -> dict[str, str]:
    """Context ids that are set right now."""
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class StructuredJsonFormatter(logging.Formatter):
    """One JSON object per line, for log shipping in production."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **current_context(),
        }

        extra_data = getattr(record, "extra_data", None)
        if isinstance(extra_data, dict):
            payload.update(extra_data)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["location"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }
        return json.dumps(payload, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable single-line format for local development."""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        if "request_id" in context:
            context["request_id"] = context["request_id"][:8]
        tags = ", ".join(f"{_TEXT_LABELS[name]}={value}" for name, value in context.items())
        tag_str = f" [{tags}]" if tags else ""

        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} | {record.levelname:<8} | {record.name}{tag_str} | {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Adapter that copies the current context ids into ``extra``."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **current_context()}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger for the given module name."""
    return ContextLogger(logging.getLogger(name), {})


def _use_json(json_format: bool | None) -> bool:
    if json_format is not None:
        return json_format
    if os.getenv("LOG_FORMAT", "").lower() == "json":
        return True
    return not sys.stdout.isatty() and os.getenv("ENVIRONMENT", "development") == "production"


def configure_logging(
    log_level: str = "INFO",
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """
    Install handlers on the root logger.

    Args:
        log_level: Minimum level; the LOG_LEVEL environment variable wins.
        json_format: Force JSON (True) or text (False). None picks JSON when
            LOG_FORMAT=json or when running non-interactively in production.
        log_file: Also write to this file.
    """
    level_name = os.getenv("LOG_LEVEL", log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    use_json = _use_json(json_format)
    formatter: logging.Formatter = StructuredJsonFormatter() if use_json else ContextualFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)

    # Quieter third-party loggers
    for name, module_level in {
        "mealplanner": level,
        "uvicorn": logging.INFO,
        "uvicorn.access": logging.WARNING,
        "httpx": logging.WARNING,
    }.items():
        logging.getLogger(name).setLevel(module_level)

    get_logger(__name__).info(
        f"Logging configured: level={level_name}, format={'json' if use_json else 'text'}"
    )


def set_context(request_id: str | None = None, recipe_id: str | None = None) -> None:
    """Set context ids for the rest of the current task."""
    for name, value in (("request_id", request_id), ("recipe_id", recipe_id)):
        if value is not None:
            _CONTEXT_VARS[name].set(value)


def clear_context() -> None:
    """Unset all context ids."""
    for var in _CONTEXT_VARS.values():
        var.set(None)


class LoggingContext:
    """
    Set context ids for the duration of a ``with`` block.

    Ids left as None keep their outer value. Nested blocks restore the outer
    ids on exit.
    """

    def __init__(self, request_id: str | None = None, recipe_id: str | None = None):
        self._values = {"request_id": request_id, "recipe_id": recipe_id}
        self._tokens: dict[str, Token] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self._values.items():
            if value is not None:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
