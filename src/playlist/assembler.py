from __future__ import annotations

from typing import List

from playlist.models import (
    MISSING,
    CanonicalMap,
    CanonicalPlaylist,
    LoadedMap,
    LoadedPlaylist,
)


def to_loaded_playlist(playlist: CanonicalPlaylist, maps: List[LoadedMap]) -> LoadedPlaylist:
    """Attach resolved maps to the playlist's metadata, copied verbatim."""
    return LoadedPlaylist(
        title=playlist.title,
        author=playlist.author,
        description=playlist.description,
        cover=playlist.cover,
        maps=maps,
    )


def _to_canonical_map(beatmap: LoadedMap) -> CanonicalMap:
    # A looked-up miss (online=None) is kept with an empty hash.
    hash_hex = beatmap.online.hash if beatmap.online is not None else ""
    return CanonicalMap.from_hash(bytes.fromhex(hash_hex.lower()), beatmap.date_added)


def to_canonical_playlist(playlist: LoadedPlaylist) -> CanonicalPlaylist:
    """
    Project a loaded playlist back to the canonical shape for saving.

    Maps that were never looked up are dropped; every other map is written
    as a hash reference. Order is preserved.

    Raises:
        ValueError: If a catalog hash is not valid hex
    """
    return CanonicalPlaylist(
        title=playlist.title,
        author=playlist.author,
        description=playlist.description,
        cover=playlist.cover,
        maps=[_to_canonical_map(m) for m in playlist.maps if m.online is not MISSING],
    )
