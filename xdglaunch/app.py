"""Command line entry point -- detect the default editor and open files."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from xdglaunch.core.config import Config
from xdglaunch.core.errors import CommandParsingFailed, ExecParseError, XdgLaunchError
from xdglaunch.core.field_codes import ExpansionContext, expand_exec
from xdglaunch.log import get_logger
from xdglaunch.platform.launcher import open_file, open_file_with, spawn_detached
from xdglaunch.platform.resolver import ApplicationResolver

_log = get_logger(name="app")


def _print_argv(argv: Sequence[str]) -> None:
    for arg in argv:
        print(arg)


def _noop_spawn(argv: Sequence[str]) -> None:
    pass


def _cmd_detect(args: argparse.Namespace, config: Config) -> int:
    entry = _resolver(config).detect_editor()
    print(f"{entry.desktop_id}\t{entry.display_name}\t{entry.source_path}")
    print(f"Exec={entry.exec_command}")
    return 0


def _cmd_open(args: argparse.Namespace, config: Config) -> int:
    resolver = _resolver(config)
    spawn = _noop_spawn if args.dry_run else spawn_detached
    if args.with_app:
        argv = open_file_with(
            application=args.with_app,
            path=args.path,
            resolver=resolver,
            file_uris=config.file_uris,
            spawn=spawn,
        )
    else:
        argv = open_file(
            entry=resolver.detect_editor(),
            path=args.path,
            file_uris=config.file_uris,
            spawn=spawn,
        )
    if args.dry_run:
        _print_argv(argv)
    return 0


def _cmd_expand(args: argparse.Namespace, config: Config) -> int:
    ctx = ExpansionContext(
        target_path=args.path,
        icon=args.icon,
        entry_name=args.name,
        entry_file_path=args.entry_file,
        file_uris=config.file_uris,
    )
    try:
        argv = expand_exec(exec_line=args.exec_line, ctx=ctx)
    except ExecParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    if not argv:
        raise CommandParsingFailed(args.exec_line, reason="empty command")
    _print_argv(argv)
    return 0


def _resolver(config: Config) -> ApplicationResolver:
    return ApplicationResolver(
        data_dirs=config.search_dirs(),
        mime_types=config.editor_mime_types,
    )


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xdglaunch",
        description="Open files with freedesktop default applications",
    )
    parser.add_argument("--config", default=None, help="Path to config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    detect = sub.add_parser("detect", help="Show the detected default editor")
    detect.set_defaults(func=_cmd_detect)

    open_ = sub.add_parser("open", help="Open a file with the default editor")
    open_.add_argument("path")
    open_.add_argument("--with", dest="with_app", default=None, help="Application name")
    open_.add_argument("--dry-run", action="store_true", help="Print the command only")
    open_.set_defaults(func=_cmd_open)

    expand = sub.add_parser("expand", help="Expand an Exec value")
    expand.add_argument("exec_line")
    expand.add_argument("path", nargs="?", default=None)
    expand.add_argument("--icon", default=None)
    expand.add_argument("--name", default=None)
    expand.add_argument("--entry-file", default=None)
    expand.set_defaults(func=_cmd_expand)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the xdglaunch command."""
    args = create_arg_parser().parse_args(argv)
    try:
        config = Config.load(args.config)
        return args.func(args, config)
    except XdgLaunchError as exc:
        _log.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
