"""
Logging setup and per-step timing for strandbias.

Log records go through the standard logging module. Interactive runs get a
rich handler on stderr, so the result table on stdout stays clean; batch runs
can tee into a plain log file as well.
"""

import logging
import time
from collections import Counter
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.logging import RichHandler

__all__ = [
    "setup_logging",
    "timed",
]

_console = Console(stderr=True)

LOG_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries whose INFO output is noise next to ours
QUIET_LOGGERS = ("pysam",)


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """
    Route strandbias logging to the console and, optionally, a file.

    Args:
        verbose: DEBUG instead of INFO, and show source paths in console records.
        log_file: Path to additionally write plain-text records to.
    """
    handlers: list[logging.Handler] = [
        RichHandler(console=_console, rich_tracebacks=True, markup=True, show_path=verbose)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def timed(
    operation: str,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
) -> Iterator[Counter]:
    """
    Time a step and report what it got through.

    Yields a Counter the caller bumps as it works (sites, reads, skipped, ...);
    the totals are logged with the elapsed time when the step finishes. A step
    that raises is logged at ERROR with the totals reached so far, and the
    exception propagates.

    Example:
        with timed("sample tumor", logger, logging.INFO) as tally:
            for site in sites:
                tally["sites"] += 1
    """
    log = logger or logging.getLogger(__name__)
    tally: Counter = Counter()
    start = time.perf_counter()
    log.debug("Starting: %s", operation)
    try:
        yield tally
    except Exception as e:
        log.error(
            "Failed: %s after %.3fs%s: %s",
            operation, time.perf_counter() - start, _format_tally(tally), e,
        )
        raise
    log.log(level, "Completed: %s (%.3fs)%s", operation, time.perf_counter() - start, _format_tally(tally))


def _format_tally(tally: Counter) -> str:
    if not tally:
        return ""
    return " - " + ", ".join(f"{key}={count}" for key, count in tally.items())
