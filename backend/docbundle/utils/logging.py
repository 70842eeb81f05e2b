"""
DocBundle — Logger setup and timed steps.

The ``docbundle`` logger writes to stdout at the configured level. Timed
steps report how long they ran and whether they finished or failed:

  ▶ Assemble PDF
  ✓ Assemble PDF — 42 ms
  ✗ Package ZIP — 3 ms (ArchiveCompressionError)
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Generator

from docbundle.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"

logger = logging.getLogger("docbundle")


def configure_logging(level: str) -> logging.Logger:
    """Set the level and attach a single stdout handler; safe to call again."""
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
    return logger


configure_logging(settings.log_level)


@contextmanager
def step_timer(step_name: str) -> Generator[None, None, None]:
    """Log the start of *step_name*, then its duration and outcome."""
    logger.info("▶ %s", step_name)
    start = time.perf_counter()
    try:
        yield
    except BaseException as exc:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.warning("✗ %s — %.0f ms (%s)", step_name, elapsed_ms, type(exc).__name__)
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("✓ %s — %.0f ms", step_name, elapsed_ms)
