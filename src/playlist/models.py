"""
models.py

In-memory playlist shapes.

Two families live here:
- Canonical*: format-neutral structure produced by either decoder and
  consumed by the binary encoder. Built fresh for every load/save.
- Loaded*: what callers hold after a load; every map reference has been
  resolved against the catalog or carries an import error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class BeatmapType(str, Enum):
    KEY = "key"
    HASH = "hash"
    ZIP = "zip"
    LEVEL_ID = "levelID"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "BeatmapType":
        """Map a stored tag to a member; anything unrecognized is UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class MapImportError(str, Enum):
    BEATMAP_TYPE_ZIP_NOT_SUPPORTED = "beatmap-type-zip-not-supported"
    BEATMAP_TYPE_LEVEL_ID_NOT_SUPPORTED = "beatmap-type-level-id-not-supported"
    BEATMAP_TYPE_UNKNOWN = "beatmap-type-unknown"

    @property
    def message(self) -> str:
        return _IMPORT_ERROR_MESSAGES[self]


_IMPORT_ERROR_MESSAGES = {
    MapImportError.BEATMAP_TYPE_ZIP_NOT_SUPPORTED: "zip payloads unsupported",
    MapImportError.BEATMAP_TYPE_LEVEL_ID_NOT_SUPPORTED: "level-id references unsupported",
    MapImportError.BEATMAP_TYPE_UNKNOWN: "unknown map type",
}


class _Missing:
    """Marks an ``online`` field that was never looked up."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


# ============================================================
# Canonical structure
# ============================================================


@dataclass
class CanonicalMap:
    """One map reference; the payload field that matters depends on ``type``."""

    date_added: datetime
    type: BeatmapType
    key: Optional[int] = None
    hash: Optional[bytes] = None
    zip_data: Optional[bytes] = None
    level_id: Optional[str] = None

    @classmethod
    def from_hash(cls, hash_: bytes, date_added: datetime) -> "CanonicalMap":
        return cls(date_added=date_added, type=BeatmapType.HASH, hash=hash_)

    @classmethod
    def from_key(cls, key: int, date_added: datetime) -> "CanonicalMap":
        return cls(date_added=date_added, type=BeatmapType.KEY, key=key)


@dataclass
class CanonicalPlaylist:
    title: str
    author: str
    description: str = ""
    cover: Optional[bytes] = None
    maps: List[CanonicalMap] = field(default_factory=list)


# ============================================================
# Catalog entries
# ============================================================


@dataclass(frozen=True)
class BeatmapOnline:
    """A beatmap as the catalog describes it. Only ``hash`` is required."""

    hash: str
    key: str = ""
    name: str = ""
    song_name: str = ""
    song_author: str = ""
    level_author: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


# ============================================================
# Loaded structure
# ============================================================


OnlineField = Union[BeatmapOnline, None, _Missing]


@dataclass
class LoadedMap:
    """
    A map after resolution.

    ``online`` is MISSING when no lookup happened, None when the catalog had
    no match, otherwise the catalog entry. A map never carries both an
    online value and an error.
    """

    date_added: datetime
    online: OnlineField = MISSING
    error: Optional[MapImportError] = None

    def __post_init__(self) -> None:
        if self.online is not MISSING and self.error is not None:
            raise ValueError("a map cannot be both looked up and in error")

    @property
    def looked_up(self) -> bool:
        return self.online is not MISSING

    @property
    def resolved(self) -> bool:
        return isinstance(self.online, BeatmapOnline)


@dataclass
class LoadedPlaylist:
    title: str
    author: str
    description: str = ""
    cover: Optional[bytes] = None
    maps: List[LoadedMap] = field(default_factory=list)
    path: Optional[Path] = None


# ============================================================
# Migration outcome
# ============================================================


class MigrationStatus(str, Enum):
    MIGRATED = "migrated"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"


@dataclass(frozen=True)
class MigrationResult:
    status: MigrationStatus
    source: Path
    target: Path

    @property
    def ok(self) -> bool:
        return self.status is MigrationStatus.MIGRATED
