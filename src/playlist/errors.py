from __future__ import annotations


class PlaylistError(Exception):
    """Base error for playlist decoding and encoding."""


class BlisterFormatError(PlaylistError):
    """A binary playlist could not be decoded or encoded."""


class InvalidMagicNumberError(BlisterFormatError):
    """The buffer does not start with the binary playlist marker."""


class LegacyPlaylistError(PlaylistError):
    """Legacy JSON text is malformed or has the wrong shape."""
