"""
loader.py

Public entry point for reading and writing playlist files.

Load:
    bytes -> legacy JSON | binary -> canonical -> resolved maps -> LoadedPlaylist
Save:
    LoadedPlaylist -> canonical (hash refs only) -> binary -> file

Fatal conditions collapse to None (load) or False (save) after being logged.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

import config
from logger import get_logger
from playlist import blister
from playlist.assembler import to_canonical_playlist, to_loaded_playlist
from playlist.errors import BlisterFormatError
from playlist.legacy import parse_legacy_playlist
from playlist.models import (
    CanonicalPlaylist,
    LoadedPlaylist,
    MigrationResult,
    MigrationStatus,
)
from playlist.progress import Progress
from playlist.resolver import resolve_maps
from providers.base import BeatmapCatalog

logger = get_logger(__name__)

PathLike = Union[str, Path]


def converted_playlist_path(path: PathLike) -> Path:
    """Sibling of ``path`` with the binary playlist extension."""
    path = Path(path)
    return path.with_name(f"{path.stem}.{config.PLAYLIST_EXTENSION}")


def _write_atomic(path: Path, buffer: bytes) -> None:
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        tmp.write_bytes(buffer)
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class PlaylistLoader:
    """
    Loads and saves playlists against a beatmap catalog.

    Examples:
        >>> loader = PlaylistLoader()
        >>> playlist = loader.load("Playlists/favs.bplist", force_convert=True)
        >>> loader.save("Playlists/favs.blist", playlist)
        True
    """

    def __init__(
        self,
        catalog: Optional[BeatmapCatalog] = None,
        max_workers: Optional[int] = None,
    ):
        if catalog is None:
            from providers.beatsaver import BeatSaverCatalog

            catalog = BeatSaverCatalog()

        self.catalog = catalog
        self.max_workers = max_workers

    # ------------------------------------------------------------
    # Load
    # ------------------------------------------------------------

    def _decode(self, path: Path, buffer: bytes, legacy: bool) -> Optional[CanonicalPlaylist]:
        if legacy:
            return parse_legacy_playlist(buffer)

        try:
            return blister.deserialize(buffer)
        except BlisterFormatError as e:
            logger.warning(f"Unreadable binary playlist {path}: {e}")
            return None

    def load(
        self,
        path: PathLike,
        force_convert: bool = False,
        progress: Optional[Progress] = None,
    ) -> Optional[LoadedPlaylist]:
        """
        Read a playlist file in either format and resolve its maps.

        With ``force_convert`` a legacy file is rewritten as ``<stem>.blist``
        next to it and removed once the new file is saved.

        Returns:
            The loaded playlist, or None when the file is missing or
            unreadable
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Playlist not found: {path}")
            return None

        try:
            buffer = path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read playlist {path}: {e}")
            return None

        legacy = blister.is_legacy_format(buffer)
        logger.debug(f"Loading {'legacy' if legacy else 'binary'} playlist {path}")

        canonical = self._decode(path, buffer, legacy)
        if canonical is None:
            return None

        maps = resolve_maps(canonical, self.catalog, progress, self.max_workers)
        output = to_loaded_playlist(canonical, maps)
        output.path = path

        if legacy and force_convert:
            result = self.migrate_playlist_file(path, output)
            if result.ok:
                output.path = result.target

        return output

    # ------------------------------------------------------------
    # Save
    # ------------------------------------------------------------

    def save(self, path: PathLike, playlist: LoadedPlaylist) -> bool:
        """
        Write ``playlist`` in the binary format.

        The file is written whole through a temporary sibling, so a failed
        save leaves whatever was at ``path`` untouched.

        Returns:
            True when the file was written
        """
        path = Path(path)
        try:
            buffer = blister.serialize(to_canonical_playlist(playlist))
            _write_atomic(path, buffer)
        except (BlisterFormatError, ValueError, OSError) as e:
            logger.error(f"Failed to save playlist {path}: {e}")
            return False

        logger.info(f"Saved playlist '{playlist.title}' to {path}")
        return True

    # ------------------------------------------------------------
    # Migration
    # ------------------------------------------------------------

    def migrate_playlist_file(self, path: PathLike, playlist: LoadedPlaylist) -> MigrationResult:
        """
        Save ``playlist`` next to ``path`` as a binary file, then delete
        ``path``. The source is only removed when the save succeeded.
        """
        source = Path(path)
        target = converted_playlist_path(source)

        if not self.save(target, playlist):
            logger.warning(f"Kept legacy playlist {source}; conversion could not be saved")
            return MigrationResult(MigrationStatus.SAVE_FAILED, source, target)

        if source == target:
            return MigrationResult(MigrationStatus.MIGRATED, source, target)

        try:
            source.unlink()
        except OSError as e:
            logger.warning(f"Converted {source} but could not remove it: {e}")
            return MigrationResult(MigrationStatus.DELETE_FAILED, source, target)

        logger.info(f"Converted legacy playlist {source} -> {target}")
        return MigrationResult(MigrationStatus.MIGRATED, source, target)
