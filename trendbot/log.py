"""Logging for trendbot: console + daily file, tagged with the current run.

Components log through children of the ``trendbot`` logger
(``trendbot.topics.news``, ``trendbot.job``...), so the file log shows which
fetcher or stage a line came from. Lines written while a trending run is in
progress carry that run's tag, including lines from fetcher threads.
"""

import logging
import sys
from contextlib import contextmanager
from datetime import datetime

from .config import LOGS_DIR

ROOT = "trendbot"
NO_RUN = "-"

_logger = None
_run_tag = NO_RUN


class RunContextFilter(logging.Filter):
    """Stamps `record.run` with the tag of the run in progress."""

    def filter(self, record):
        record.run = _run_tag
        return True


@contextmanager
def run_context(tag: str):
    """Tag every log line written inside the block with `tag`.

    Runs never overlap (the scheduler serializes them), so a module-level
    tag is visible to the engine's worker threads as well.
    """
    global _run_tag
    previous, _run_tag = _run_tag, tag
    try:
        yield tag
    finally:
        _run_tag = previous


def _setup() -> logging.Logger:
    logger = logging.getLogger(ROOT)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    run_filter = RunContextFilter()

    # Console — INFO by default, DEBUG with --verbose
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.addFilter(run_filter)
    console.setFormatter(logging.Formatter("  %(message)s"))
    logger.addHandler(console)

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            LOGS_DIR / f"trendbot_{datetime.now():%Y%m%d}.log", encoding="utf-8"
        )
    except OSError:
        # Read-only home (containers): console only
        return logger
    file_handler.setLevel(logging.DEBUG)
    file_handler.addFilter(run_filter)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)-8s [%(run)s] %(name)s: %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(file_handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """The ``trendbot`` logger, or its ``trendbot.<name>`` child."""
    global _logger
    if _logger is None:
        _logger = _setup()
    return _logger.getChild(name) if name else _logger


def set_verbose(verbose: bool = True):
    """Switch console handler to DEBUG level."""
    for handler in get_logger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(logging.DEBUG if verbose else logging.INFO)


def log(msg: str):
    get_logger().info(msg)
