"""Structured logging for the Nord client using structlog.

Context travels through structlog.contextvars, so values bound for one
action submission follow it across awaits without leaking into concurrent
submissions.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from nord.actions.models import Action


def setup_logging(log_level: str = "INFO") -> None:
    """Route structlog through stdlib logging with JSON or console output.

    NORD_LOG_FORMAT selects the renderer:
    - "json" for machine-readable output
    - "console" for human-readable output (default)
    """
    log_format = os.environ.get("NORD_LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    nord_logger = logging.getLogger("nord")
    nord_logger.handlers.clear()
    nord_logger.addHandler(handler)
    nord_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    nord_logger.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)


@contextmanager
def bind_action_context(action: Action) -> Iterator[None]:
    """Bind the action's kind, nonce and timestamp to every log line inside."""
    with structlog.contextvars.bound_contextvars(
        action_kind=type(action.kind).__name__,
        nonce=action.nonce,
        current_timestamp=action.current_timestamp,
    ):
        yield
