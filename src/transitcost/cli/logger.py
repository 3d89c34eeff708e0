"""Logging helpers for the transitcost CLI."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "bold_cyan",
    "INFO": "bold_green",
    "WARNING": "bold_yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

LOG_FORMAT = "[%(asctime)s] <%(name)s> %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _use_color() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def configure_logging(verbose: bool) -> None:
    """
    Configure logging to stderr for the CLI commands.

    We log at INFO level, or at DEBUG level when verbose, using
    colors only when stderr is a terminal and NO_COLOR is unset.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler(sys.stderr)
    if _use_color():
        handler.setFormatter(
            colorlog.ColoredFormatter(
                fmt="%(log_color)s" + LOG_FORMAT.replace(": %(message)s", ":%(reset)s %(message)s"),
                log_colors=LOG_COLORS,
                datefmt=LOG_DATEFMT,
            )
        )
    else:
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
