"""
resolver.py

Turns canonical map references into loaded maps.

Each reference is either looked up in the catalog (key / hash) or tagged
with an import error (zip / level id / unknown). Lookups run concurrently
on a thread pool; results come back in input order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from env import get_env
from logger import get_logger
from playlist.models import (
    BeatmapType,
    CanonicalMap,
    CanonicalPlaylist,
    LoadedMap,
    MapImportError,
)
from playlist.progress import Progress
from providers.base import BeatmapCatalog, CatalogError

logger = get_logger(__name__)


def resolve_map(beatmap: CanonicalMap, catalog: BeatmapCatalog) -> LoadedMap:
    """
    Resolve a single reference.

    A catalog failure is logged and recorded as "not found" (online=None).
    """
    map_type = beatmap.type

    if map_type is BeatmapType.KEY:
        lookup, ref = catalog.get_beatmap_by_key, format(beatmap.key, "x")
    elif map_type is BeatmapType.HASH:
        lookup, ref = catalog.get_beatmap_by_hash, beatmap.hash.hex()
    elif map_type is BeatmapType.ZIP:
        return LoadedMap(beatmap.date_added, error=MapImportError.BEATMAP_TYPE_ZIP_NOT_SUPPORTED)
    elif map_type is BeatmapType.LEVEL_ID:
        return LoadedMap(
            beatmap.date_added, error=MapImportError.BEATMAP_TYPE_LEVEL_ID_NOT_SUPPORTED
        )
    else:
        return LoadedMap(beatmap.date_added, error=MapImportError.BEATMAP_TYPE_UNKNOWN)

    try:
        online = lookup(ref)
    except CatalogError as e:
        logger.warning(f"Catalog lookup failed for {map_type.value} {ref}: {e}")
        online = None

    if online is None:
        logger.debug(f"No catalog entry for {map_type.value} {ref}")

    return LoadedMap(beatmap.date_added, online=online)


def resolve_maps(
    playlist: CanonicalPlaylist,
    catalog: BeatmapCatalog,
    progress: Optional[Progress] = None,
    max_workers: Optional[int] = None,
) -> List[LoadedMap]:
    """
    Resolve every map of ``playlist`` concurrently.

    ``progress`` is started with the map count, advanced once per finished
    map whatever its outcome, and completed after all maps are joined.
    """
    progress = progress if progress is not None else Progress()
    max_workers = max_workers or get_env().max_workers

    maps = playlist.maps
    progress.start(len(maps))

    def task(beatmap: CanonicalMap) -> LoadedMap:
        try:
            return resolve_map(beatmap, catalog)
        finally:
            progress.advance()

    if maps:
        with ThreadPoolExecutor(
            max_workers=min(max_workers, len(maps)), thread_name_prefix="resolve"
        ) as executor:
            futures = [executor.submit(task, m) for m in maps]
            loaded = [f.result() for f in futures]
    else:
        loaded = []

    progress.complete()

    errors = sum(1 for m in loaded if m.error is not None)
    missing = sum(1 for m in loaded if m.looked_up and m.online is None)
    logger.info(
        f"Resolved {len(loaded)} maps for '{playlist.title}' "
        f"({missing} not found, {errors} unsupported)"
    )
    return loaded
