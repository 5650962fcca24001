"""structlog configuration for kuructl.

Two output modes, both written to stderr:
- Human (default): ``ConsoleRenderer``, colored when stderr is a terminal
- JSON (--log-json): one JSON object per record

Records from stdlib loggers (``logging.getLogger(__name__)`` throughout the
package) and from structlog loggers share one processor chain, so both carry
the console location bound by :func:`bind_console_location`.

Log records are diagnostics only. What the operator sees at the prompt is
written by the console itself.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

from kuructl.domain.location import Root

if TYPE_CHECKING:
    from kuructl.domain.location import Location

# Third-party loggers kept at WARNING even with --verbose.
QUIET_LOGGERS = ("asyncio", "prompt_toolkit")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route every kuructl log record through structlog to stderr.

    Safe to call more than once; the root handler is replaced each time.

    Args:
        verbose: Enable DEBUG-level output for ``kuructl``. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("kuructl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_console_location(location: Location) -> None:
    """Tag later log records with ``console_location`` (``root`` or ``layer:<id>``)."""
    value = "root" if isinstance(location, Root) else f"layer:{location.id}"
    structlog.contextvars.bind_contextvars(console_location=value)
