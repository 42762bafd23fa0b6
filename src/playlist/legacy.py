"""
legacy.py

Legacy JSON playlists (.json / .bplist).

Shape:
    {
      "playlistTitle": str,
      "playlistAuthor": str,
      "playlistDescription": str,
      "image": "data:image/png;base64,...",
      "songs": [{"hash": str, "key": str, "levelId": str, "songName": str}]
    }
"""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from logger import get_logger
from playlist.blister import truncate_to_millis
from playlist.errors import LegacyPlaylistError
from playlist.models import BeatmapType, CanonicalMap, CanonicalPlaylist

logger = get_logger(__name__)


# ============================================================
# Field helpers
# ============================================================


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _decode_image(image: Any) -> Optional[bytes]:
    """Decode a base64 cover, with or without a ``data:`` URI prefix."""
    if not isinstance(image, str) or not image:
        return None

    if image.startswith("data:") and "," in image:
        image = image.split(",", 1)[1]

    try:
        return base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError):
        logger.debug("Ignoring undecodable legacy cover image")
        return None


def _hex_bytes(value: Any) -> Optional[bytes]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return bytes.fromhex(value.lower())
    except ValueError:
        return None


def _hex_int(value: Any) -> Optional[int]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return int(value, 16)
    except ValueError:
        return None


def _convert_song(song: Dict[str, Any], date_added: datetime) -> CanonicalMap:
    hash_ = _hex_bytes(song.get("hash"))
    if hash_ is not None:
        return CanonicalMap.from_hash(hash_, date_added)

    key = _hex_int(song.get("key"))
    if key is not None:
        return CanonicalMap.from_key(key, date_added)

    level_id = song.get("levelId")
    if isinstance(level_id, str) and level_id:
        return CanonicalMap(date_added=date_added, type=BeatmapType.LEVEL_ID, level_id=level_id)

    return CanonicalMap(date_added=date_added, type=BeatmapType.UNKNOWN)


# ============================================================
# Public API
# ============================================================


def convert_legacy_playlist(legacy: Dict[str, Any]) -> CanonicalPlaylist:
    """
    Translate a decoded legacy document into the canonical structure.

    Every song becomes a map: by hash when it has a valid one, else by key,
    else by level id, else UNKNOWN. Legacy songs carry no date, so all maps
    are stamped with the conversion time, at the millisecond precision
    the binary format keeps.
    """
    now = truncate_to_millis(datetime.now(timezone.utc))
    songs = legacy.get("songs") or []

    return CanonicalPlaylist(
        title=_text(legacy.get("playlistTitle")),
        author=_text(legacy.get("playlistAuthor")),
        description=_text(legacy.get("playlistDescription")),
        cover=_decode_image(legacy.get("image")),
        maps=[_convert_song(song, now) for song in songs],
    )


def _check_shape(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise LegacyPlaylistError(f"top level is {type(data).__name__}, expected object")

    songs = data.get("songs")
    if songs is None:
        return data
    if not isinstance(songs, list):
        raise LegacyPlaylistError("songs is not an array")

    for i, song in enumerate(songs):
        if not isinstance(song, dict):
            raise LegacyPlaylistError(f"song #{i} is not an object")

    return data


def decode_legacy_playlist(buffer: bytes) -> Dict[str, Any]:
    """
    Raises:
        LegacyPlaylistError: On invalid UTF-8, invalid JSON or a shape mismatch
    """
    try:
        data = json.loads(buffer.decode("utf-8-sig"))
    except UnicodeDecodeError as e:
        raise LegacyPlaylistError(f"not UTF-8 text: {e}") from e
    except json.JSONDecodeError as e:
        raise LegacyPlaylistError(f"invalid JSON: {e}") from e

    return _check_shape(data)


def parse_legacy_playlist(buffer: bytes) -> Optional[CanonicalPlaylist]:
    """Decode and convert a legacy playlist; None when it cannot be read."""
    try:
        legacy = decode_legacy_playlist(buffer)
    except LegacyPlaylistError as e:
        logger.warning(f"Unreadable legacy playlist: {e}")
        return None

    return convert_legacy_playlist(legacy)
