"""structlog configuration for graphlog.

Logs always go to stderr so ``--json`` and ``--quiet`` output on stdout
stays machine-readable. The console renderer is the default and
``--log-json`` switches to JSON lines. Once a command opens its store,
every record carries ``store`` and ``command`` from :func:`bind_invocation`.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

HANDLER_NAME = "graphlog.stderr"

# Third-party loggers kept at WARNING even under --verbose
QUIET_LOGGERS = ("networkx", "pydantic_settings", "markdown_it")


def bind_invocation(*, store: Path, command: str) -> None:
    """Attach the store root and command path to every later log record."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(store=str(store), command=command)


def _drop_console_store(
    _logger: object, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    # The store path is noise on a terminal; JSON logs keep it.
    event_dict.pop("store", None)
    return event_dict


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Install the graphlog stderr handler, replacing any earlier one.

    Handlers installed by others (pytest's capture, an embedding
    application) are left alone.

    Args:
        verbose: DEBUG for ``graphlog.*`` loggers, else WARNING.
        log_json: JSON lines with ISO timestamps instead of console lines.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    renderer_chain: list[structlog.types.Processor]
    if log_json:
        renderer_chain = [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer_chain = [
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            _drop_console_store,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderer_chain,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("graphlog").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
