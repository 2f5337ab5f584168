"""Subcommands exposed by the workspace-meta CLI."""

from __future__ import annotations

import argparse
import asyncio
from abc import ABC, abstractmethod
from argparse import ArgumentParser

from wsmeta_core.app import PACKAGE_KINDS, RunReport, WorkspaceMetaApp

from . import output


class CLICommand(ABC):
    """Base interface for CLI subcommands."""

    name: str = ""
    help: str = ""

    @classmethod
    @abstractmethod
    def configure(cls, parser: ArgumentParser) -> None:
        """Let the command configure CLI arguments."""

    @abstractmethod
    def run(self, args: argparse.Namespace, app: WorkspaceMetaApp) -> int:
        """Execute the command and return the process exit code."""


class InitCommand(CLICommand):
    """Create a starter configuration file."""

    name = "init"
    help = "create a workspace-meta configuration file"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing configuration file.",
        )

    def run(self, args: argparse.Namespace, app: WorkspaceMetaApp) -> int:
        output.info("Initializing workspace-meta configuration...")
        path = app.init_config(force=args.force)
        if path is None:
            output.info(
                "A configuration file already exists; use --force to overwrite it. "
                "Initialization cancelled."
            )
            return 0
        output.success(f"Created configuration file: {path.relative_to(app.workspace_root)}")
        output.info("Next steps:")
        output.info("1. Edit the configuration file to match your needs")
        output.info("2. Run `workspace-meta sync` to apply changes to all packages")
        output.info("3. Run `workspace-meta check` to verify synchronization")
        return 0


class _RunCommand(CLICommand):
    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "filter",
            nargs="?",
            default=None,
            help="Only run for packages whose name or relative path matches this glob.",
        )


class SyncCommand(_RunCommand):
    """Apply every plugin and write the results to disk."""

    name = "sync"
    help = "apply plugins to all packages and write changes"

    def run(self, args: argparse.Namespace, app: WorkspaceMetaApp) -> int:
        report = asyncio.run(app.sync(args.filter))
        if not report.results:
            output.warn("No packages found in workspace")
            return 0
        output.info(f"Synced {len(report.results)} package(s)")

        for result in report.results:
            if result.errors:
                output.error(f"{result.package_name}: {len(result.errors)} error(s)")
                for message in result.errors:
                    output.error(f"  {message}")
            elif result.files_changed:
                output.success(
                    f"{result.package_name}: {len(result.files_changed)} file(s) updated"
                )
                for path in result.files_changed:
                    output.info(f"  {path}")
            else:
                output.info(f"{result.package_name}: up to date")

        if report.total_errors:
            output.error(f"Sync completed with {report.total_errors} error(s)")
            return 1
        output.success(
            f"Sync completed successfully. {report.total_files_changed} file(s) updated."
        )
        return 0


class CheckCommand(_RunCommand):
    """Report packages whose files differ from what the plugins would write."""

    name = "check"
    help = "report packages that are out of sync without writing"

    def run(self, args: argparse.Namespace, app: WorkspaceMetaApp) -> int:
        report = asyncio.run(app.check(args.filter))
        if not report.results:
            output.warn("No packages found in workspace")
            return 0
        output.info(f"Checked {len(report.results)} package(s) for differences")
        self._print_results(report)

        if report.total_errors:
            output.error(f"Check completed with {report.total_errors} error(s)")
            return 1
        if report.total_files_changed:
            output.warn(
                f"{report.total_files_changed} file(s) in "
                f"{len(report.changed_packages)} package(s) are out of sync"
            )
            output.info("Run `workspace-meta sync` to update them")
            return 1
        output.success("All packages are in sync")
        return 0

    @staticmethod
    def _print_results(report: RunReport) -> None:
        for result in report.results:
            if result.errors:
                output.error(f"{result.package_name}: {len(result.errors)} error(s)")
                for message in result.errors:
                    output.error(f"  {message}")
            elif result.files_changed:
                output.warn(
                    f"{result.package_name}: {len(result.files_changed)} file(s) out of sync"
                )
                for path in result.files_changed:
                    output.warn(f"  {path}")
            else:
                output.success(f"{result.package_name}: in sync")


class GenerateCommand(CLICommand):
    """Scaffold a new package and bring it in line with the plugins."""

    name = "generate"
    help = "generate a new package using the configured generator"

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument("package_name", help="npm name of the new package")
        parser.add_argument(
            "--path",
            default=None,
            help="Package directory relative to the workspace root.",
        )
        parser.add_argument(
            "--type",
            dest="kind",
            default=PACKAGE_KINDS[0],
            choices=PACKAGE_KINDS,
            help="Parent folder used when --path is not given (default: packages).",
        )
        parser.add_argument(
            "--include-generated",
            action="store_true",
            dest="include_generated",
            help="List the new package in workspace_packages seen by plugins.",
        )

    def run(self, args: argparse.Namespace, app: WorkspaceMetaApp) -> int:
        report = asyncio.run(
            app.generate(
                args.package_name,
                path=args.path,
                kind=args.kind,
                include_generated_package=args.include_generated,
            )
        )
        output.info(f"Created package at: {report.package_path}")
        result = report.result
        if result is None or result.errors:
            errors = result.errors if result is not None else ()
            output.error(f"Package generation completed with {len(errors)} error(s):")
            for message in errors:
                output.error(f"  {message}")
            return 1
        output.success(
            f"Package '{report.package_name}' generated successfully with "
            f"{len(result.files_changed)} file(s)"
        )
        for path in result.files_changed:
            output.info(f"  {path}")
        return 0


COMMANDS: tuple[type[CLICommand], ...] = (
    InitCommand,
    SyncCommand,
    CheckCommand,
    GenerateCommand,
)
