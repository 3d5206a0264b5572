"""Structured logging for verification runs, built on structlog.

Logs always go to stderr: the CLI reserves stdout for the JSON verdicts.
Batch runs use the JSON renderer so every event can be shipped as-is;
interactive runs get the console renderer.

Every event logged while a batch is being verified carries that batch's
``batch_id`` (see :func:`batch_context`), so events from concurrent
recognition calls can be grouped after the fact.

Usage::

    from catalog_verifier.logging_config import batch_context, get_logger

    logger = get_logger(__name__)
    with batch_context(products=25):
        logger.info("batch_verification_completed", verified=19)
    # {"event": "batch_verification_completed", "batch_id": "3f9c…", "products": 25, "verified": 19, ...}
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

# Third-party loggers that log every request at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure stdlib logging and structlog for a verification run.

    Args:
        json_logs: Render events as JSON lines instead of the console format.
        log_level: Threshold name (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            case-insensitive. Unknown names raise ``AttributeError``.
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    # Per-request HTTP lines only when debugging
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


@contextmanager
def batch_context(batch_id: Optional[str] = None, **fields: Any) -> Iterator[str]:
    """Bind ``batch_id`` (generated when omitted) and ``fields`` to every event in the block.

    Context variables are copied into tasks created inside the block, so
    recognition calls running concurrently keep the id of their batch.
    """
    batch_id = batch_id or uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(batch_id=batch_id, **fields):
        yield batch_id
