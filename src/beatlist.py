#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys

from bootstrap import bootstrap_base_env, bootstrap_run_context


def _dispatch_help(argv: list[str]) -> int:
    # Support:
    #   beatlist help
    #   beatlist help show
    if argv and argv[0] == "help":
        argv = argv[1:]

    try:
        build_parser().parse_args(argv + ["--help"])
    except SystemExit:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="beatlist")

    sub = p.add_subparsers(dest="command", required=True)

    help_cmd = sub.add_parser("help", help="Show help")
    help_cmd.add_argument("path", nargs="*", help="Command path to show help for")
    help_cmd.set_defaults(_help=True)

    # Keep imports inside builder to avoid early side effects.
    from cli.cli_env import build_env_parser
    from cli.cli_playlist import build_convert_parser, build_show_parser

    build_show_parser(sub)
    build_convert_parser(sub)
    build_env_parser(sub)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    bootstrap_base_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "_help", False):
        return _dispatch_help(argv)

    bootstrap_run_context(
        command=args.command,
        verbose=bool(getattr(args, "verbose", False)),
        quiet=bool(getattr(args, "quiet", False)),
    )

    # Initialize logging AFTER run-context env stamping
    from logger import init_logging, get_logger

    init_logging()

    log = get_logger(__name__)
    log.debug(f"beatlist starting: {args.command}")

    if args.command == "show":
        from cli.cli_playlist import handle_show

        return handle_show(args)

    if args.command == "convert":
        from cli.cli_playlist import handle_convert

        return handle_convert(args)

    if args.command == "env":
        from cli.cli_env import handle_env

        return handle_env(args)

    raise RuntimeError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
