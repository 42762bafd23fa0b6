"""
client.py

BeatSaver catalog client.

Responsibilities:
- Map lookups by key and by content hash
- Translating BeatSaver map documents into BeatmapOnline

Does NOT:
- Cache results
- Decide what a failed lookup means for a playlist
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

import config
from env import get_env
from logger import get_logger
from playlist.models import BeatmapOnline
from providers.base import BeatmapCatalog
from providers.beatsaver.api_manager import http_get_json

logger = get_logger(__name__)


def parse_beatmap(data: Dict[str, Any]) -> Optional[BeatmapOnline]:
    """
    Build a BeatmapOnline from a BeatSaver map document.

    The content hash lives on the newest version (``versions[0].hash``);
    older documents carry it at the top level. Returns None when neither is
    present.
    """
    versions = data.get("versions") or []
    latest = versions[0] if versions and isinstance(versions[0], dict) else {}

    hash_ = latest.get("hash") or data.get("hash")
    if not isinstance(hash_, str) or not hash_:
        return None

    metadata = data.get("metadata") or {}
    return BeatmapOnline(
        hash=hash_,
        key=str(data.get("id") or data.get("key") or latest.get("key") or ""),
        name=str(data.get("name") or ""),
        song_name=str(metadata.get("songName") or ""),
        song_author=str(metadata.get("songAuthorName") or ""),
        level_author=str(metadata.get("levelAuthorName") or ""),
        raw=data,
    )


class BeatSaverCatalog(BeatmapCatalog):
    name = "beatsaver"

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_base_sec: Optional[float] = None,
    ):
        env = get_env()
        self.base_url = (base_url or env.beatsaver_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else env.request_timeout
        self.max_retries = max_retries if max_retries is not None else env.max_retries
        self.backoff_base_sec = (
            backoff_base_sec if backoff_base_sec is not None else env.backoff_base_sec
        )
        self.session = session or requests.Session()
        self.headers = {"User-Agent": config.USER_AGENT, "Accept": "application/json"}

        logger.debug(f"Initialized BeatSaver catalog at {self.base_url}")

    def _get_beatmap(self, path: str) -> Optional[BeatmapOnline]:
        data = http_get_json(
            self.base_url + path,
            session=self.session,
            headers=self.headers,
            timeout=self.timeout,
            max_retries=self.max_retries,
            backoff_base_sec=self.backoff_base_sec,
        )
        if data is None:
            return None

        beatmap = parse_beatmap(data)
        if beatmap is None:
            logger.warning(f"BeatSaver returned a map without a hash for {path}")
        return beatmap

    def get_beatmap_by_key(self, key: str) -> Optional[BeatmapOnline]:
        return self._get_beatmap(config.BEATSAVER_MAP_BY_KEY_PATH.format(key=key))

    def get_beatmap_by_hash(self, hash_: str) -> Optional[BeatmapOnline]:
        return self._get_beatmap(config.BEATSAVER_MAP_BY_HASH_PATH.format(hash=hash_))
