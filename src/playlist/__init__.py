"""
Playlist loading and saving.

Public API:
- PlaylistLoader (load / save / migrate_playlist_file)
- LoadedPlaylist, LoadedMap, MapImportError
- Progress, ProgressStatus
"""

from playlist.loader import PlaylistLoader, converted_playlist_path
from playlist.models import (
    MISSING,
    BeatmapOnline,
    BeatmapType,
    CanonicalMap,
    CanonicalPlaylist,
    LoadedMap,
    LoadedPlaylist,
    MapImportError,
    MigrationResult,
    MigrationStatus,
)
from playlist.progress import Progress, ProgressStatus

__all__ = [
    "PlaylistLoader",
    "converted_playlist_path",
    "MISSING",
    "BeatmapOnline",
    "BeatmapType",
    "CanonicalMap",
    "CanonicalPlaylist",
    "LoadedMap",
    "LoadedPlaylist",
    "MapImportError",
    "MigrationResult",
    "MigrationStatus",
    "Progress",
    "ProgressStatus",
]
