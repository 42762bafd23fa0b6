from __future__ import annotations

import logging
from pathlib import Path

# Resolution runs on worker threads, so the thread name is part of every line.
FILE_LOG_FORMAT = "%(asctime)s | [%(levelname)s] | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_file_handler(logfile: Path) -> logging.FileHandler:
    logfile.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(logfile, encoding="utf-8", delay=True)
    handler.setLevel(logging.NOTSET)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def repoint_file_handler(handler: logging.FileHandler, new_logfile: Path) -> None:
    """Close ``handler`` and point it at ``new_logfile`` without detaching it."""
    new_logfile.parent.mkdir(parents=True, exist_ok=True)

    with handler.lock:
        handler.close()
        handler.baseFilename = str(new_logfile)
        handler.stream = None
