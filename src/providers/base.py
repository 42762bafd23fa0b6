from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from playlist.models import BeatmapOnline


class CatalogError(Exception):
    """Raised when a catalog lookup fails for reasons other than a miss."""


class BeatmapCatalog(ABC):
    """
    Abstract interface for beatmap catalogs (BeatSaver, local caches, ...).

    Lookups return None when the catalog has no such map.
    """

    name: str

    @abstractmethod
    def get_beatmap_by_key(self, key: str) -> Optional[BeatmapOnline]:
        """Look up a map by its lowercase hex key."""
        raise NotImplementedError

    @abstractmethod
    def get_beatmap_by_hash(self, hash_: str) -> Optional[BeatmapOnline]:
        """Look up a map by its lowercase hex content hash."""
        raise NotImplementedError
