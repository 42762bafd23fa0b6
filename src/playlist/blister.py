"""
blister.py

Binary playlist codec.

Layout on disk:
    BLISTER_MAGIC (8 bytes) | gzip( BSON document )

Document:
    title, author, description, cover (binary),
    maps: [{type, dateAdded, key | hash | bytes | levelID}]
"""

from __future__ import annotations

import gzip
import zlib
from datetime import datetime, timezone
from typing import Any, Dict

import bson
from bson.binary import Binary
from bson.codec_options import CodecOptions
from bson.errors import BSONError

import config
from logger import get_logger
from playlist.errors import BlisterFormatError, InvalidMagicNumberError
from playlist.models import BeatmapType, CanonicalMap, CanonicalPlaylist

logger = get_logger(__name__)

_CODEC_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)


# ============================================================
# Format detection
# ============================================================


def validate_magic_number(buffer: bytes) -> None:
    """
    Raises:
        InvalidMagicNumberError: If ``buffer`` does not start with the marker
    """
    magic = config.BLISTER_MAGIC
    if len(buffer) < len(magic) or buffer[: len(magic)] != magic:
        raise InvalidMagicNumberError("missing binary playlist marker")


def is_legacy_format(buffer: bytes) -> bool:
    """
    Classify ``buffer`` as legacy JSON (True) or binary (False).

    Any marker failure counts as legacy; a corrupt binary file is left for
    the JSON parser to reject.
    """
    try:
        validate_magic_number(buffer)
    except InvalidMagicNumberError:
        return True
    return False


# ============================================================
# Dates
# ============================================================


def truncate_to_millis(value: datetime) -> datetime:
    """BSON datetimes hold milliseconds; finer precision is lost on save."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


# ============================================================
# Decoding
# ============================================================


def _decode_map(raw: Any) -> CanonicalMap:
    if not isinstance(raw, dict):
        raise BlisterFormatError(f"map entry is not a document: {type(raw).__name__}")

    date_added = raw.get("dateAdded")
    if not isinstance(date_added, datetime):
        raise BlisterFormatError("map entry has no dateAdded")

    map_type = BeatmapType.parse(raw.get("type"))
    out = CanonicalMap(date_added=date_added, type=map_type)

    if map_type is BeatmapType.KEY:
        out.key = int(raw["key"])
    elif map_type is BeatmapType.HASH:
        out.hash = bytes(raw["hash"])
    elif map_type is BeatmapType.ZIP:
        out.zip_data = bytes(raw["bytes"])
    elif map_type is BeatmapType.LEVEL_ID:
        out.level_id = str(raw["levelID"])

    return out


def deserialize(buffer: bytes) -> CanonicalPlaylist:
    """
    Decode a binary playlist.

    Raises:
        BlisterFormatError: On a bad marker, gzip stream, BSON document or
            map entry
    """
    validate_magic_number(buffer)
    body = buffer[len(config.BLISTER_MAGIC):]

    try:
        document = bson.decode(gzip.decompress(body), codec_options=_CODEC_OPTIONS)
    except (OSError, EOFError, zlib.error) as e:
        raise BlisterFormatError(f"corrupt compressed body: {e}") from e
    except BSONError as e:
        raise BlisterFormatError(f"corrupt document: {e}") from e

    maps = document.get("maps") or []
    if not isinstance(maps, list):
        raise BlisterFormatError("maps is not an array")

    try:
        decoded_maps = [_decode_map(m) for m in maps]
    except (KeyError, TypeError, ValueError) as e:
        raise BlisterFormatError(f"map entry payload does not match its type: {e}") from e

    cover = document.get("cover")
    return CanonicalPlaylist(
        title=str(document.get("title") or ""),
        author=str(document.get("author") or ""),
        description=str(document.get("description") or ""),
        cover=bytes(cover) if cover is not None else None,
        maps=decoded_maps,
    )


# ============================================================
# Encoding
# ============================================================


def _encode_map(beatmap: CanonicalMap) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": beatmap.type.value,
        "dateAdded": truncate_to_millis(beatmap.date_added),
    }

    if beatmap.type is BeatmapType.KEY and beatmap.key is not None:
        out["key"] = beatmap.key
    elif beatmap.type is BeatmapType.HASH and beatmap.hash is not None:
        out["hash"] = Binary(beatmap.hash)
    elif beatmap.type is BeatmapType.ZIP and beatmap.zip_data is not None:
        out["bytes"] = Binary(beatmap.zip_data)
    elif beatmap.type is BeatmapType.LEVEL_ID and beatmap.level_id is not None:
        out["levelID"] = beatmap.level_id
    else:
        raise BlisterFormatError(f"cannot encode {beatmap.type.value} map without its payload")

    return out


def serialize(playlist: CanonicalPlaylist) -> bytes:
    """
    Encode a playlist into the binary format.

    Raises:
        BlisterFormatError: If a map is missing the payload its type needs
    """
    document = {
        "title": playlist.title,
        "author": playlist.author,
        "description": playlist.description or None,
        "cover": Binary(playlist.cover) if playlist.cover is not None else None,
        "maps": [_encode_map(m) for m in playlist.maps],
    }

    body = gzip.compress(bson.encode(document), compresslevel=config.BLISTER_COMPRESSION_LEVEL)
    logger.debug(f"Serialized playlist '{playlist.title}' ({len(playlist.maps)} maps)")
    return config.BLISTER_MAGIC + body
