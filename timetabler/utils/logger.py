"""Logging setup for the timetabler package."""

import logging
import sys

logger = logging.getLogger("timetabler")

_handler = None


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach the console handler to the package logger and set its level."""
    global _handler

    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # sys.stderr may have been replaced since the last call, so rebuild the handler
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(_handler)

    return logger
