from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import config
from env.paths import PROJECT_ROOT, logs_dir

# ------------------------------------------------------------
# Minimal dotenv loader (read-only helper, bootstrap owns usage)
# ------------------------------------------------------------


def _load_dotenv(path) -> None:
    """
    Minimal dotenv loader.
    - Silent
    - Never overrides existing os.environ
    """
    if not path.exists():
        return

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        k, v = line.split("=", 1)
        k = k.strip()
        v = v.strip()

        # strip inline comments
        if " #" in v:
            v = v.split(" #", 1)[0].rstrip()
        elif "\t#" in v:
            v = v.split("\t#", 1)[0].rstrip()

        # strip quotes
        if len(v) >= 2 and v[0] == v[-1] and v[0] in ("'", '"'):
            v = v[1:-1]

        if k and k not in os.environ:
            os.environ[k] = v


# ------------------------------------------------------------
# Errors / helpers
# ------------------------------------------------------------


class ConfigError(RuntimeError):
    pass


def _as_bool(v: str) -> bool:
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(v: str, default: int) -> int:
    try:
        return int(v)
    except ValueError:
        return default


def _as_float(v: str, default: float) -> float:
    try:
        return float(v)
    except ValueError:
        return default


# ------------------------------------------------------------
# Logging environment (SAFE ANYWHERE)
# ------------------------------------------------------------


@dataclass(frozen=True)
class LoggingEnvironment:
    log_level: str
    log_retention: int
    verbose: bool
    quiet: bool


def get_logging_env() -> LoggingEnvironment:
    log_level = os.environ.get("LOG_LEVEL", config.DEFAULT_LOG_LEVEL)
    log_retention = _as_int(
        os.environ.get("LOG_RETENTION", str(config.DEFAULT_LOG_RETENTION)),
        config.DEFAULT_LOG_RETENTION,
    )

    verbose = _as_bool(os.environ.get("BEATLIST_VERBOSE", "0"))
    quiet = _as_bool(os.environ.get("BEATLIST_QUIET", "0"))

    return LoggingEnvironment(
        log_level=log_level,
        log_retention=log_retention,
        verbose=verbose,
        quiet=quiet,
    )


# ------------------------------------------------------------
# Full runtime environment
# ------------------------------------------------------------


class Environment:
    def __init__(self):
        # Logging snapshot (immutable)
        self._logging = get_logging_env()

        # ---- CATALOG API ----
        self.beatsaver_api_url = os.environ.get(
            "BEATSAVER_API_URL", config.DEFAULT_BEATSAVER_API_URL
        ).rstrip("/")
        self.request_timeout = _as_int(
            os.environ.get("BEATSAVER_TIMEOUT", ""),
            config.DEFAULT_REQUEST_TIMEOUT_SEC,
        )
        self.max_retries = _as_int(
            os.environ.get("BEATSAVER_MAX_RETRIES", ""), config.DEFAULT_MAX_RETRIES
        )
        self.backoff_base_sec = _as_float(
            os.environ.get("BEATSAVER_BACKOFF_BASE_SEC", ""),
            config.DEFAULT_BACKOFF_BASE_SEC,
        )

        # ---- RESOLUTION ----
        self.max_workers = _as_int(
            os.environ.get("BEATLIST_MAX_WORKERS", ""), config.DEFAULT_MAX_WORKERS
        )
        if self.max_workers < 1:
            raise ConfigError(
                f"BEATLIST_MAX_WORKERS must be at least 1, got {self.max_workers}"
            )

        # ---- RUN CONTEXT ----
        self.command = os.environ.get("BEATLIST_COMMAND", "bootstrap")
        self.run_id = os.environ.get("BEATLIST_RUN_ID", "")

    def as_dict(self) -> dict:
        return {
            "Logging": {
                "log_level": self.log_level,
                "log_retention": self.log_retention,
                "logs_dir": str(logs_dir()),
                "verbose": self.verbose,
                "quiet": self.quiet,
            },
            "Run": {
                "command": self.command,
                "run_id": self.run_id,
                "project_root": str(PROJECT_ROOT),
            },
            "Catalog": {
                "beatsaver_api_url": self.beatsaver_api_url,
                "request_timeout": self.request_timeout,
                "max_retries": self.max_retries,
                "backoff_base_sec": self.backoff_base_sec,
            },
            "Resolution": {
                "max_workers": self.max_workers,
            },
        }

    # ---- logging passthrough ----
    @property
    def log_level(self) -> str:
        return self._logging.log_level

    @property
    def log_retention(self) -> int:
        return self._logging.log_retention

    @property
    def verbose(self) -> bool:
        return self._logging.verbose

    @property
    def quiet(self) -> bool:
        return self._logging.quiet


_ENV: Optional[Environment] = None


def reset_env_caches() -> None:
    """Invalidate cached views of environment variables."""
    global _ENV
    _ENV = None


def get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = Environment()
    return _ENV
