"""Application object that wires workspace resolution, config and the plugin runner."""

from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from .config import ConfigLoader, GenerateNewPackageOptions, WorkspaceMetaConfig
from .discovery import PackageInfo, discover_packages
from .errors import ConfigurationError, InvalidPackageNameError
from .events import EventBus
from .fs import write_json
from .plugin import PluginResult, PluginRunner
from .workspace import PACKAGE_JSON_FILE, WorkspaceLayout, WorkspaceResolver

__all__ = [
    "CONFIG_TEMPLATE",
    "GenerateReport",
    "PACKAGE_KINDS",
    "RunReport",
    "WorkspaceMetaApp",
    "is_valid_package_name",
]

PACKAGE_KINDS = ("packages", "apps")

_PACKAGE_NAME_RE = re.compile(
    r"^(?:@[a-z0-9-*~][a-z0-9-*._~]*/)?[a-z0-9-~][a-z0-9-._~]*$"
)
_MAX_PACKAGE_NAME_LENGTH = 214

CONFIG_TEMPLATE = '''"""workspace-meta configuration."""

from wsmeta_builtin import ensure_package_json
from wsmeta_core import define_config


def standard_fields(package_json):
    # Add your organization's standard fields
    package_json.setdefault("author", "Your Name")
    package_json.setdefault("license", "MIT")
    package_json.setdefault(
        "repository",
        {
            "type": "git",
            "url": "https://github.com/your-org/your-repo.git",
            "directory": package_json.get("name"),
        },
    )
    return package_json


config = define_config(
    # Optional: format generated files
    # formatter=prettier_formatter,
    plugins=[
        ensure_package_json(standard_fields),
        # Add more plugins here
    ],
)
'''


def is_valid_package_name(name: str) -> bool:
    """Check ``name`` against npm package naming rules."""

    return bool(_PACKAGE_NAME_RE.match(name)) and len(name) <= _MAX_PACKAGE_NAME_LENGTH


@dataclass(frozen=True)
class RunReport:
    """Aggregated results of a sync or check run."""

    is_check_mode: bool
    results: tuple[PluginResult, ...] = ()

    @property
    def total_errors(self) -> int:
        return sum(len(result.errors) for result in self.results)

    @property
    def total_files_changed(self) -> int:
        return sum(len(result.files_changed) for result in self.results)

    @property
    def changed_packages(self) -> tuple[str, ...]:
        return tuple(
            result.package_name
            for result in self.results
            if result.files_changed and not result.errors
        )

    @property
    def success(self) -> bool:
        if self.total_errors:
            return False
        if self.is_check_mode:
            return self.total_files_changed == 0
        return True


@dataclass(frozen=True)
class GenerateReport:
    package_name: str
    package_path: Path
    package_json: Mapping[str, Any] = field(default_factory=dict)
    result: PluginResult | None = None

    @property
    def success(self) -> bool:
        return self.result is not None and self.result.ok


class WorkspaceMetaApp:
    """Entry point that glues the workspace, configuration and plugin runner."""

    def __init__(
        self,
        *,
        start_dir: Path | str | None = None,
        resolver: WorkspaceResolver | None = None,
        logger: logging.Logger | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("wsmeta_core.app")
        self.events = events or EventBus()
        self.resolver = resolver or WorkspaceResolver()
        normalized_start = Path(start_dir) if start_dir is not None else None
        self.workspace_root = self.resolver.require_workspace_root(normalized_start)
        self.layout: WorkspaceLayout = self.resolver.layout(self.workspace_root)
        self.config_loader = ConfigLoader(self.layout.config_dir)

    # ---------- configuration ----------

    def init_config(self, *, force: bool = False) -> Path | None:
        """Write the starter ``config.py``; returns None when one exists and ``force`` is off."""

        existing = self.config_loader.config_file_path()
        if existing is not None and not force:
            self.logger.info("configuration already exists at %s", existing)
            return None
        self.layout.ensure()
        target = existing or self.layout.config_dir / "config.py"
        target.write_text(CONFIG_TEMPLATE, encoding="utf-8")
        return target

    def load_config(self) -> WorkspaceMetaConfig:
        return self.config_loader.load_required()

    def discover(
        self,
        config: WorkspaceMetaConfig,
        package_glob: str | None = None,
    ) -> list[PackageInfo]:
        return discover_packages(
            self.workspace_root,
            package_glob,
            include_root_package=config.include_root_package,
        )

    def runner(
        self,
        config: WorkspaceMetaConfig,
        workspace_packages: Sequence[PackageInfo] | None = None,
    ) -> PluginRunner:
        return PluginRunner(
            self.workspace_root,
            config,
            config_directory=self.layout.config_dir,
            workspace_packages=workspace_packages,
            logger=self.logger,
            events=self.events,
        )

    # ---------- operations ----------

    async def sync(self, package_glob: str | None = None) -> RunReport:
        return await self._run(package_glob, is_check_mode=False)

    async def check(self, package_glob: str | None = None) -> RunReport:
        return await self._run(package_glob, is_check_mode=True)

    async def _run(self, package_glob: str | None, *, is_check_mode: bool) -> RunReport:
        config = self.load_config()
        packages = self.discover(config, package_glob)
        if not packages:
            self.logger.warning("no packages found in workspace %s", self.workspace_root)
            return RunReport(is_check_mode=is_check_mode)
        # Plugins see every member, not only the filtered subset.
        known = self.discover(config) if package_glob else packages
        runner = self.runner(config, known)
        results = await runner.run_for_packages(packages, is_check_mode=is_check_mode)
        return RunReport(is_check_mode=is_check_mode, results=tuple(results))

    def resolve_package_path(
        self,
        package_name: str,
        *,
        path: str | None = None,
        kind: str = "packages",
    ) -> Path:
        if path:
            return (self.workspace_root / path).resolve()
        if kind not in PACKAGE_KINDS:
            raise ConfigurationError(
                f"Unknown package type: {kind}",
                f"Choose one of: {', '.join(PACKAGE_KINDS)}",
            )
        return self.workspace_root / kind / package_name

    async def generate(
        self,
        package_name: str,
        *,
        path: str | None = None,
        kind: str = "packages",
        include_generated_package: bool = False,
    ) -> GenerateReport:
        """Scaffold a package with ``generate_new_package`` and run every plugin on it."""

        if not is_valid_package_name(package_name):
            raise InvalidPackageNameError(
                f"Invalid package name: {package_name}",
                "Please use a valid package name",
            )
        config = self.load_config()
        if config.generate_new_package is None:
            raise ConfigurationError(
                "generate_new_package function not defined in configuration",
                "Please define a generate_new_package function in your "
                "workspace-meta configuration",
            )

        package_path = self.resolve_package_path(package_name, path=path, kind=kind)
        existing = tuple(self.discover(config))
        self.logger.info("creating package at %s", package_path)

        generated = config.generate_new_package(
            GenerateNewPackageOptions(
                package_name=package_name,
                package_path=package_path,
                workspace_packages=existing,
            )
        )
        if inspect.isawaitable(generated):
            generated = await generated
        if not isinstance(generated, Mapping):
            raise ConfigurationError(
                "generate_new_package must return a package.json mapping",
                "Return a dict from generate_new_package",
            )
        package_json = dict(generated)
        write_json(package_path / PACKAGE_JSON_FILE, package_json)

        package = PackageInfo(name=package_name, path=package_path, package_json=package_json)
        known = existing + (package,) if include_generated_package else existing
        runner = self.runner(config, known)
        result = await runner.run_for_package(package, is_check_mode=False)
        return GenerateReport(
            package_name=package_name,
            package_path=package_path,
            package_json=package_json,
            result=result,
        )
