"""Optional scripting extensions to configure logging."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Third-party loggers that are too chatty unless we are verbose
NOISY_LOGGERS = ("urllib3", "sqlglot", "ibis")


class LocalTZRichHandler(RichHandler):
    """Extend the RichHandler to provide timezone aware timestamps."""

    def render(self, *, record, traceback, message_renderable):
        path = Path(record.pathname).name
        level = self.get_level_text(record)
        time_format = None if self.formatter is None else self.formatter.datefmt
        log_time = datetime.fromtimestamp(record.created).astimezone()
        return self._log_render(
            self.console,
            [message_renderable] if not traceback else [message_renderable, traceback],
            log_time=log_time,
            time_format=time_format,
            level=level,
            path=path,
            line_no=record.lineno,
            link_path=record.pathname if self.enable_link_path else None,
        )


def configure(verbose: bool, *, console: Console | None = None) -> None:
    """
    Configure the logging subsystem to use LocalTZRichHandler.

    Arguments:
        verbose: log at DEBUG level, including third-party loggers.
        console: where to log (default: a stderr console, so that
            logs do not mix with the tables we print on stdout).
    """
    level = logging.DEBUG if verbose else logging.INFO
    handler = LocalTZRichHandler(
        console=console if console is not None else Console(stderr=True),
        show_time=True,
        show_level=True,
        show_path=False,
        log_time_format="[%Y-%m-%d %H:%M:%S %z]",
    )
    logging.basicConfig(
        level=level,
        format="<%(name)s> %(message)s",
        handlers=[handler],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


log = logging.getLogger("scripting")
"""Logger that the scripting package should use."""
