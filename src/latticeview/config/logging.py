"""structlog setup for the CLI.

Stdlib loggers used throughout the view core (``logging.getLogger(__name__)``)
are routed through structlog's ProcessorFormatter, so relayout failures,
plugin errors and telemetry spans share one format. All log output goes to
stderr; stdout carries command results only.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog
from structlog.types import Processor

LOGGER_NAME = "latticeview"
_HANDLER_NAME = "latticeview-stderr"


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _render_chain(log_json: bool) -> list[Processor]:
    if log_json:
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set the ``latticeview`` level.

    Safe to call repeatedly: the previous latticeview handler is replaced and
    bound context from an earlier command is dropped.

    Args:
        verbose: DEBUG for the ``latticeview`` logger; WARNING otherwise.
        log_json: One JSON object per line instead of the console renderer.
    """
    structlog.contextvars.clear_contextvars()
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    for old in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)


def bind_dataset(path: Path | str) -> None:
    """Tag every following log line with the dataset being viewed."""
    structlog.contextvars.bind_contextvars(dataset=str(path))
