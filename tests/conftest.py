import logging
import threading
import time
from datetime import datetime, timezone

import pytest

from providers.base import BeatmapCatalog, CatalogError


@pytest.fixture(autouse=True)
def clean_env_and_logging(monkeypatch, tmp_path_factory):
    """
    Ensure tests don't leak env, logger state, or cached environment views.
    """

    keys = [
        "BEATLIST_LOGS_DIR",
        "BEATLIST_COMMAND",
        "BEATLIST_RUN_ID",
        "BEATLIST_VERBOSE",
        "BEATLIST_QUIET",
        "BEATLIST_MAX_WORKERS",
        "BEATSAVER_API_URL",
        "BEATSAVER_TIMEOUT",
        "BEATSAVER_MAX_RETRIES",
        "BEATSAVER_BACKOFF_BASE_SEC",
        "LOG_LEVEL",
        "LOG_RETENTION",
    ]
    for k in keys:
        monkeypatch.delenv(k, raising=False)

    # Keep log files out of the project tree
    monkeypatch.setenv("BEATLIST_LOGS_DIR", str(tmp_path_factory.mktemp("logs")))

    from env import reset_env_caches
    from logger.state import STATE

    reset_env_caches()
    STATE.reset()

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    yield

    reset_env_caches()


DATE = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class FakeCatalog(BeatmapCatalog):
    """
    In-memory catalog. Lookups for refs listed in ``failing`` raise
    CatalogError; ``delay`` holds each lookup open so calls overlap.
    """

    name = "fake"

    def __init__(self, by_hash=None, by_key=None, failing=(), delay=0.0):
        self.by_hash = dict(by_hash or {})
        self.by_key = dict(by_key or {})
        self.failing = set(failing)
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def _lookup(self, table, kind, ref):
        with self._lock:
            self.calls.append((kind, ref))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if ref in self.failing:
                raise CatalogError(f"boom: {ref}")
            return table.get(ref)
        finally:
            with self._lock:
                self.active -= 1

    def get_beatmap_by_key(self, key):
        return self._lookup(self.by_key, "key", key)

    def get_beatmap_by_hash(self, hash_):
        return self._lookup(self.by_hash, "hash", hash_)


def online(hash_, key="", name=""):
    from playlist.models import BeatmapOnline

    return BeatmapOnline(hash=hash_, key=key, name=name)
