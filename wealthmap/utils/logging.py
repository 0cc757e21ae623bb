"""Logging utilities with structured output for the wealthmap analytics service."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..config import LOG_LEVEL

ROOT_NAMESPACE = "wealthmap"


def configure_logging(namespace: str = ROOT_NAMESPACE) -> logging.Logger:
    """Attach a single stream handler to ``namespace`` and return its logger.

    Message bodies are written as ``event key=value ...`` so one record stays on
    one line. Calling this again is a no-op once the handler is installed.
    """

    logger = logging.getLogger(namespace)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(LOG_LEVEL)
    logger.propagate = False
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    base = configure_logging()
    if child:
        return base.getChild(child)
    return base


@contextmanager
def log_timing(logger: logging.Logger, event: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """Log ``event`` with its fields and ``elapsed_ms`` when the block exits.

    The yielded dict can be filled in by the block; failures are logged with
    ``ok=False`` and re-raised.
    """

    started = time.perf_counter()
    ok = False
    try:
        yield fields
        ok = True
    finally:
        fields["ok"] = ok
        fields["elapsed_ms"] = int((time.perf_counter() - started) * 1000)
        body = " ".join(f"{key}={value}" for key, value in fields.items())
        logger.log(logging.INFO if ok else logging.WARNING, "%s %s", event, body)


__all__ = ["configure_logging", "get_logger", "log_timing", "ROOT_NAMESPACE"]
