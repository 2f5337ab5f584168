"""Command line surface for workspace-meta."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from wsmeta_core.app import WorkspaceMetaApp
from wsmeta_core.errors import WorkspaceMetaError
from wsmeta_core.events import EventBus
from wsmeta_core.workspace import WorkspaceResolver

from . import output
from .commands import COMMANDS

CLI_VERSION = "0.1.0"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workspace-meta",
        description="Keep package metadata in sync across a monorepo.",
    )
    parser.add_argument("--version", action="version", version=f"workspace-meta v{CLI_VERSION}")
    parser.add_argument(
        "-C",
        "--cwd",
        dest="cwd",
        default=".",
        help="Directory to start looking for the workspace root (default: current folder).",
    )
    parser.add_argument(
        "--config-dir",
        dest="config_dir",
        default=None,
        help="Configuration folder relative to the workspace root (default: .workspace-meta).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = False

    for command_cls in COMMANDS:
        sub = subparsers.add_parser(command_cls.name, help=command_cls.help)
        command_cls.configure(sub)
        sub.set_defaults(command_cls=command_cls)

    return parser


def _configure_logging(level_name: str | None) -> None:
    level = logging.getLevelName((level_name or "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    command_cls = getattr(args, "command_cls", None)
    if command_cls is None:
        parser.print_help()
        return 0

    start_dir = Path(args.cwd)
    resolver = WorkspaceResolver(
        cli_overrides={
            "config_dir": args.config_dir,
            "log_level": "DEBUG" if args.verbose else None,
        }
    )
    _configure_logging(resolver.resolve_setting("log_level", start_dir))

    events = EventBus()
    output.attach(events)
    try:
        app = WorkspaceMetaApp(start_dir=start_dir, resolver=resolver, events=events)
        return command_cls().run(args, app)
    except WorkspaceMetaError as exc:
        output.error(str(exc))
        if exc.help_message:
            output.info(exc.help_message)
        return 1
