from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------
# Project root
# ---------------------------------------------------------------------

# This file lives in src/env/, so project root is two levels up
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------
# Base directories (override-friendly)
# ---------------------------------------------------------------------


def _resolve_dir(env_var: str, default: Path) -> Path:
    """
    Resolve a directory path from an environment variable or default.
    Does not create it; the logger owns directory creation.
    """
    raw = os.environ.get(env_var)
    return Path(raw).expanduser().resolve() if raw else default


def logs_dir() -> Path:
    """
    Current logs directory; re-read so tests and bootstrap can repoint it.
    """
    return _resolve_dir("BEATLIST_LOGS_DIR", PROJECT_ROOT / "logs")


LOGS_DIR = logs_dir()


# ---------------------------------------------------------------------
# Log layout helpers
# ---------------------------------------------------------------------


def module_logs_dir(module: str) -> Path:
    """
    Base log directory for a CLI command (e.g. show, convert).
    """
    path = logs_dir() / module
    path.mkdir(parents=True, exist_ok=True)
    return path
