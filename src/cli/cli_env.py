from __future__ import annotations

import argparse

from rich.markup import escape
from rich.table import Table

from env import get_env
from cli.render import RENDER
from cli.common import dispatch_subparser_help


def build_env_parser(subparsers: argparse._SubParsersAction) -> None:
    env = subparsers.add_parser("env", help="Environment utilities")
    sub = env.add_subparsers(dest="env_cmd", required=True)

    help_p = sub.add_parser("help", help="Show help for env")
    help_p.add_argument("path", nargs="*", help="Subcommand path")
    help_p.set_defaults(action="help", _help_parser=env)

    dump_p = sub.add_parser("dump", help="Show resolved runtime environment")
    dump_p.set_defaults(action="dump")


def handle_env(args: argparse.Namespace) -> int:
    if args.action == "help":
        return dispatch_subparser_help(
            args._help_parser, list(getattr(args, "path", []) or [])
        )

    if args.action == "dump":
        return handle_env_dump()

    raise RuntimeError(f"Unknown env action: {args.action}")


def _section_table(section: str, values: dict) -> Table:
    table = Table(title=section, title_justify="left", title_style="bold cyan")
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    for key, value in values.items():
        table.add_row(key, escape(str(value)))

    return table


def handle_env_dump() -> int:
    RENDER.print("[bold]Runtime Environment[/bold]")

    for section, values in get_env().as_dict().items():
        RENDER.print()
        RENDER.print(_section_table(section, values))

    return 0
