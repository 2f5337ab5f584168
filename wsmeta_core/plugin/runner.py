"""Run the configured plugins against workspace packages.

Each package run follows a propose-then-commit protocol. Plugins write
through their context; every write is claimed in a fresh
:class:`WriteLedger`, formatted, and compared with the file on disk. In
check mode differing files are reported immediately and nothing is ever
written. In sync mode differing files are staged and only committed once
every plugin for the package has finished without error.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Sequence

from wsmeta_core.discovery import PackageInfo
from wsmeta_core.events import (
    FILE_CHANGED_EVENT,
    FORMATTER_ERROR_EVENT,
    PLUGIN_ERROR_EVENT,
    POST_PACKAGE_EVENT,
    PRE_PACKAGE_EVENT,
    EventBus,
)
from wsmeta_core.fs import PackageFiles
from wsmeta_core.workspace import DEFAULT_CONFIG_DIR

from .context import PluginContext
from .errors import CommitWriteError, FormatterError, PluginExecutionError
from .formatter import FormatterAdapter
from .ledger import WriteLedger

if TYPE_CHECKING:
    from wsmeta_core.config import WorkspaceMetaConfig

__all__ = ["PluginResult", "PluginRunner"]


@dataclass(frozen=True)
class PluginResult:
    """Outcome of running every plugin against one package."""

    package_name: str
    files_changed: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class _PackageRun:
    package: PackageInfo
    is_check_mode: bool
    ledger: WriteLedger = field(default_factory=WriteLedger)
    files_changed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def result(self) -> PluginResult:
        return PluginResult(
            package_name=self.package.name,
            files_changed=tuple(self.files_changed),
            errors=tuple(self.errors),
        )


class PluginRunner:
    """Execute the plugin list for one package at a time, strictly in order."""

    def __init__(
        self,
        workspace_path: Path | str,
        config: "WorkspaceMetaConfig",
        *,
        config_directory: Path | str | None = None,
        workspace_packages: Iterable[PackageInfo] | None = None,
        logger: logging.Logger | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.workspace_path = Path(workspace_path)
        self.config = config
        self.config_directory = (
            Path(config_directory)
            if config_directory is not None
            else self.workspace_path / DEFAULT_CONFIG_DIR
        )
        self.workspace_packages = (
            tuple(workspace_packages) if workspace_packages is not None else None
        )
        self.events = events or EventBus()
        self._logger = logger or logging.getLogger(__name__)

    async def run_for_packages(
        self,
        packages: Sequence[PackageInfo],
        *,
        is_check_mode: bool = False,
    ) -> list[PluginResult]:
        """Run every package in the order given; one result per package."""

        known = self.workspace_packages
        if known is None:
            known = tuple(packages)
        results: list[PluginResult] = []
        for package in packages:
            results.append(await self._run(package, is_check_mode, known))
        return results

    async def run_for_package(
        self,
        package: PackageInfo,
        *,
        is_check_mode: bool = False,
    ) -> PluginResult:
        known = self.workspace_packages
        if known is None:
            known = (package,)
        return await self._run(package, is_check_mode, known)

    async def _run(
        self,
        package: PackageInfo,
        is_check_mode: bool,
        workspace_packages: tuple[PackageInfo, ...],
    ) -> PluginResult:
        run = _PackageRun(package=package, is_check_mode=is_check_mode)
        files = PackageFiles(package.path)
        context = PluginContext(
            workspace_path=self.workspace_path,
            package_path=package.path,
            package_name=package.name,
            package_json=package.package_json,
            config_directory=self.config_directory,
            workspace_packages=workspace_packages,
            is_check_mode=is_check_mode,
            read_file=files.read,
            write_file=self._write_file_for(run, files),
            logger=logging.getLogger(f"wsmeta_core.plugin.{package.name}"),
        )
        self.events.emit(
            PRE_PACKAGE_EVENT,
            {"package": package.name, "check_mode": is_check_mode},
        )

        for plugin in self.config.plugins:
            try:
                outcome = plugin(context)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as exc:
                error = PluginExecutionError(exc)
                run.errors.append(str(error))
                self._logger.debug("plugin failed for %s: %s", package.name, exc)
                self.events.emit(
                    PLUGIN_ERROR_EVENT,
                    {"package": package.name, "error": str(error)},
                )

        if not is_check_mode and not run.errors:
            await self._commit(run, files)

        result = run.result()
        self.events.emit(
            POST_PACKAGE_EVENT,
            {
                "package": package.name,
                "files_changed": result.files_changed,
                "errors": result.errors,
            },
        )
        return result

    def _write_file_for(self, run: _PackageRun, files: PackageFiles):
        package_name = run.package.name

        def report_formatter_error(error: FormatterError) -> None:
            # Logged only when no sink listens for formatter errors.
            if not self.events.has_subscribers(FORMATTER_ERROR_EVENT):
                self._logger.warning("%s", error)
            self.events.emit(
                FORMATTER_ERROR_EVENT,
                {"package": package_name, "path": error.path, "error": str(error.cause)},
            )

        formatter = FormatterAdapter(
            self.config.formatter,
            logger=self._logger,
            on_error=report_formatter_error,
        )

        async def write_file(relative_path: str, content: str) -> None:
            if not isinstance(content, str):
                raise TypeError(
                    f"content for {relative_path!r} must be str, not {type(content).__name__}"
                )
            key = run.ledger.claim(relative_path)
            final_content = await formatter.format(content, files.resolve(key))
            existing = await files.read(key)
            if existing == final_content:
                return
            if run.is_check_mode:
                run.files_changed.append(key)
                self.events.emit(
                    FILE_CHANGED_EVENT,
                    {"package": package_name, "path": key, "check_mode": True},
                )
            else:
                run.ledger.propose(key, final_content)

        return write_file

    async def _commit(self, run: _PackageRun, files: PackageFiles) -> None:
        for relative_path, content in run.ledger.pending():
            try:
                await files.write(relative_path, content)
            except (OSError, UnicodeError) as exc:
                run.errors.append(str(CommitWriteError(relative_path, exc)))
                continue
            run.files_changed.append(relative_path)
            self.events.emit(
                FILE_CHANGED_EVENT,
                {"package": run.package.name, "path": relative_path, "check_mode": False},
            )
