"""Logging for the enforcer CLI — structlog rendered through a stdlib handler.

Only the ``bytecode_enforcer`` logger tree is configured; the host process'
root logger is left alone. Output goes to stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, TextIO

import structlog

LOGGER_NAME = "bytecode_enforcer"

LOG_FORMATS = ("console", "plain", "json")

# Third-party loggers held at WARNING.
_QUIET_LOGGERS = ("httpx", "httpcore")


@dataclass(frozen=True)
class LogSettings:
    level: int
    format: str


def resolve_log_settings(
    verbose: bool = False, environ: Mapping[str, str] | None = None
) -> LogSettings:
    """Read ``BYTECODE_ENFORCER_LOG_LEVEL`` / ``BYTECODE_ENFORCER_LOG_FORMAT``.

    ``verbose`` lowers the default level to DEBUG; an explicit level wins.

    Raises:
        ValueError: unknown level name or format.
    """
    env = os.environ if environ is None else environ
    level_name = env.get("BYTECODE_ENFORCER_LOG_LEVEL", "DEBUG" if verbose else "INFO")
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {level_name!r}")

    fmt = env.get("BYTECODE_ENFORCER_LOG_FORMAT", "console").strip().lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"unknown log format {fmt!r}, expected one of {', '.join(LOG_FORMATS)}")
    return LogSettings(level=level, format=fmt)


def build_renderer(fmt: str, stream: TextIO) -> structlog.types.Processor:
    """Final processor for *fmt*; console colours only when *stream* is a terminal."""
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    if fmt == "plain":
        return structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "event"], drop_missing=True
        )
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def setup_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
    """Route structlog and stdlib records of the enforcer to *stream* (stderr)."""
    settings = resolve_log_settings(verbose)
    stream = stream or sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain]
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                build_renderer(settings.format, stream),
            ],
        )
    )

    enforcer = logging.getLogger(LOGGER_NAME)
    enforcer.handlers[:] = [handler]
    enforcer.setLevel(settings.level)
    enforcer.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
