from __future__ import annotations

import argparse
from datetime import datetime

from rich.markup import escape
from rich.table import Table

from playlist.models import LoadedMap, LoadedPlaylist, MigrationResult, MigrationStatus
from playlist.progress import Progress


# ----------------------------
# Help dispatch (subparser-local)
# ----------------------------


def dispatch_subparser_help(
    parser: argparse.ArgumentParser, path: list[str] | None
) -> int:
    """
    Implements consistent `X help [subcmd ...]` behavior for a subtree parser.
    """
    if not path:
        parser.print_help()
        return 0

    try:
        parser.parse_args(path + ["--help"])
    except SystemExit:
        pass
    return 0


# ----------------------------
# Playlist rendering
# ----------------------------


def _format_date(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def describe_map(beatmap: LoadedMap) -> tuple[str, str]:
    """(status, detail) columns for a single map."""
    if beatmap.error is not None:
        return "[red]error[/red]", beatmap.error.message

    if not beatmap.looked_up:
        return "[dim]pending[/dim]", ""

    if beatmap.online is None:
        return "[yellow]not found[/yellow]", ""

    online = beatmap.online
    title = online.name or online.song_name or online.hash
    if online.song_author:
        title = f"{title} ({online.song_author})"
    return "[green]ok[/green]", escape(title)


def playlist_table(playlist: LoadedPlaylist) -> Table:
    table = Table(
        title=escape(playlist.title) if playlist.title else "(untitled)",
        caption=escape(playlist.author) if playlist.author else None,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Added")
    table.add_column("Status")
    table.add_column("Map")

    for i, beatmap in enumerate(playlist.maps, start=1):
        status, detail = describe_map(beatmap)
        table.add_row(str(i), _format_date(beatmap.date_added), status, detail)

    return table


def progress_line(progress: Progress) -> str:
    return f"Resolved {progress.done}/{progress.total} maps ({progress.status.value})"


def migration_line(result: MigrationResult) -> str:
    source = escape(str(result.source))
    target = escape(str(result.target))

    if result.status is MigrationStatus.MIGRATED:
        return f"[green]Converted[/green] {source} -> {target}"
    if result.status is MigrationStatus.DELETE_FAILED:
        return f"[yellow]Converted[/yellow] to {target}, but {source} is still present"
    return f"[red]Conversion failed[/red]; {source} left untouched"
