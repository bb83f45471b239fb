"""Structured logging for the faucet.

structlog events and plain stdlib records (startup messages, aiohttp) go
through one handler and one renderer, so a process writes a single JSON or
text stream. The service logs to stdout; CLI commands log to stderr so that
stdout carries only the command's own output.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from pydantic import SecretStr

LOG_FORMATS = ("json", "text")

REDACTED = "[REDACTED]"

# Event keys holding key material or signed payloads
REDACTED_FIELDS = frozenset(
    {
        "private_key",
        "private_key_file",
        "raw_transaction",
        "signed_transaction",
        "secret",
        "password",
    }
)


def _redact_sensitive(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask sensitive keys and any ``SecretStr`` value."""
    for key, value in event_dict.items():
        if key.lower() in REDACTED_FIELDS or isinstance(value, SecretStr):
            event_dict[key] = REDACTED
    return event_dict


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(
            f"Invalid log level: {level!r}. "
            "Valid levels are: DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    return value


def _renderers(log_format: str, stream: TextIO) -> list[structlog.typing.Processor]:
    fmt = log_format.lower()
    if fmt == "json":
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    if fmt == "text":
        return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]
    raise ValueError(
        f"Invalid log format: {log_format!r}. Valid formats are: {', '.join(LOG_FORMATS)}."
    )


def configure_logging(
    level: str = "INFO",
    log_format: str = "json",
    stream: TextIO | None = None,
) -> None:
    """Route all faucet logging to ``stream``.

    Safe to call more than once; each call replaces the previous handler.

    Parameters
    ----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_format : str
        ``json`` or ``text``.
    stream : TextIO, optional
        Destination for log lines. Defaults to stdout.

    Raises
    ------
    ValueError
        If the level or format is unknown.
    """
    log_level = _parse_level(level)
    stream = sys.stdout if stream is None else stream
    renderers = _renderers(log_format, stream)

    shared: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_sensitive,
    ]

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )
    logging.basicConfig(handlers=[handler], level=log_level, force=True)
    # the access log repeats every request at INFO
    logging.getLogger("aiohttp.access").setLevel(max(log_level, logging.WARNING))

    # Rendering lives in the handler, so loggers cached here stay valid
    # when a later call switches format or stream.
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, named after the calling module by convention."""
    return structlog.get_logger(name)


def set_request_id(request_id: str) -> None:
    """Attach ``request_id`` to every event logged in the current context."""
    structlog.contextvars.bind_contextvars(request_id=request_id)


def get_request_id() -> str | None:
    """Request ID bound to the current context, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")


def clear_request_id() -> None:
    structlog.contextvars.unbind_contextvars("request_id")
