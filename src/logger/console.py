from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from env import get_logging_env

# No explicit file: rich resolves sys.stdout at write time.
LOG_CONSOLE = Console(soft_wrap=True)


class ConsoleGateFilter(logging.Filter):
    """
    Drop console output when quiet mode is enabled after init.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not get_logging_env().quiet


def build_console_handler(level: int = logging.NOTSET) -> logging.Handler:
    handler = RichHandler(
        console=LOG_CONSOLE,
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setLevel(level)

    # RichHandler renders the level column; the formatter must not repeat it.
    handler.setFormatter(logging.Formatter("%(message)s"))

    handler.addFilter(ConsoleGateFilter())
    return handler
