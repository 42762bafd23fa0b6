from __future__ import annotations

import argparse
from pathlib import Path

from cli.common import migration_line, playlist_table, progress_line
from rich.markup import escape

from cli.render import RENDER
from playlist.blister import is_legacy_format
from playlist.loader import PlaylistLoader
from playlist.progress import Progress


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", help="Playlist file (.blist, .bplist or .json)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("-q", "--quiet", action="store_true", help="No log output on console")


def build_show_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("show", help="Load a playlist and list its maps")
    _add_common_args(p)
    p.add_argument(
        "--convert",
        action="store_true",
        help="Rewrite a legacy playlist as .blist after loading",
    )


def build_convert_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("convert", help="Convert a legacy playlist to .blist")
    _add_common_args(p)


def handle_show(args: argparse.Namespace) -> int:
    progress = Progress()
    playlist = PlaylistLoader().load(
        args.path, force_convert=bool(getattr(args, "convert", False)), progress=progress
    )

    if playlist is None:
        RENDER.print(f"[red]Could not load playlist:[/red] {escape(args.path)}")
        return 1

    if playlist.description:
        RENDER.print(escape(playlist.description))
    RENDER.print(playlist_table(playlist))
    RENDER.print(progress_line(progress))

    if playlist.path is not None and playlist.path != Path(args.path):
        RENDER.print(f"Playlist now lives at {escape(str(playlist.path))}")
    return 0


def handle_convert(args: argparse.Namespace) -> int:
    source = Path(args.path)

    try:
        legacy = is_legacy_format(source.read_bytes())
    except OSError as e:
        RENDER.print(f"[red]Could not read playlist:[/red] {escape(str(source))} ({escape(str(e))})")
        return 1

    if not legacy:
        RENDER.print(f"{escape(str(source))} is already a binary playlist; nothing to convert")
        return 0

    loader = PlaylistLoader()
    playlist = loader.load(source, progress=Progress())
    if playlist is None:
        RENDER.print(f"[red]Could not load playlist:[/red] {escape(str(source))}")
        return 1

    result = loader.migrate_playlist_file(source, playlist)
    RENDER.print(migration_line(result))
    return 0 if result.ok else 1
