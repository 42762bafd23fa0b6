"""
config.py

Central configuration for beatlist.

This file intentionally contains ONLY:
- Constants
- Tunables
- File naming conventions
- Endpoint paths

It must NOT contain:
- Business logic
- API calls
- Reading environment variables

Runtime configuration (env vars) belongs in:
- env/env.py
- bootstrap.py (CLI bootstrap)
"""

from __future__ import annotations

# ============================================================
# PLAYLIST FILES
# ============================================================

# Binary playlists are always written with this extension
PLAYLIST_EXTENSION = "blist"

# Extensions legacy JSON playlists were distributed with
LEGACY_PLAYLIST_EXTENSIONS = (".json", ".bplist")

# Format marker at the start of every binary playlist
BLISTER_MAGIC = b"Blist.v3"

# gzip level used when serializing
BLISTER_COMPRESSION_LEVEL = 9

# ============================================================
# BEATSAVER API — ENDPOINTS
# ============================================================

DEFAULT_BEATSAVER_API_URL = "https://api.beatsaver.com"

BEATSAVER_MAP_BY_KEY_PATH = "/maps/id/{key}"
BEATSAVER_MAP_BY_HASH_PATH = "/maps/hash/{hash}"

USER_AGENT = "beatlist/0.1 (+https://github.com/beatlist/beatlist)"

# ============================================================
# REQUEST DEFAULTS (env.py may override)
# ============================================================

DEFAULT_REQUEST_TIMEOUT_SEC = 30
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_BASE_SEC = 1.0

# HTTP statuses worth retrying
TRANSIENT_STATUS_CODES = (429, 500, 502, 503, 504)

# ============================================================
# MAP RESOLUTION
# ============================================================

# Thread pool size for concurrent catalog lookups
DEFAULT_MAX_WORKERS = 8

# ============================================================
# LOGGING
# ============================================================

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_RETENTION = 30
