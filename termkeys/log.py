"""Logging setup for termkeys.

Levels (ascending):
    TRACE =  5  every appended or dropped key event
    DEBUG = 10  subscriptions, reader threads starting and stopping
    INFO  = 20  startup/shutdown (default)

Usage:
    import termkeys.log  # registers TRACE level and logger.trace()
    logger = logging.getLogger(__name__)
    logger.trace("very noisy message")
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[attr-defined]


# Patch Logger class once at import time
logging.Logger.trace = _trace  # type: ignore[attr-defined]


def setup_logging(debug: bool = False, log_file: str | None = None) -> logging.Logger:
    """Configure the ``termkeys`` logger hierarchy.

    Console output goes to stderr: everything from DEBUG up with *debug*,
    warnings and errors otherwise. When *log_file* is given, a rotating
    file handler receives every record down to TRACE.

    Calling it again replaces the handlers installed by a previous call.
    """
    logger = logging.getLogger('termkeys')
    logger.setLevel(TRACE if log_file else (logging.DEBUG if debug else logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=1024 * 1024,
                backupCount=3,
            )
            file_handler.setLevel(TRACE)
            file_handler.setFormatter(fmt)
            logger.addHandler(file_handler)
        except OSError as exc:
            print(f"Warning: Could not setup file logging: {exc}", file=sys.stderr)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    console_handler.setFormatter(fmt)
    logger.addHandler(console_handler)

    return logger
