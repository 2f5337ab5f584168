"""Load and validate the user's workspace-meta configuration module."""

from __future__ import annotations

import importlib.util
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator, Mapping, Sequence, Union

from .discovery import PackageInfo
from .errors import ConfigurationError
from .plugin.api import PluginCallable
from .plugin.formatter import Formatter

__all__ = [
    "CONFIG_FILE_NAMES",
    "ConfigLoader",
    "GenerateNewPackageOptions",
    "WorkspaceMetaConfig",
    "define_config",
]

CONFIG_FILE_NAMES = ("config.py", "workspace_meta_config.py")
CONFIG_ATTRIBUTE = "config"

MISSING_CONFIG_HELP = "Run `workspace-meta init` to create a configuration file"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateNewPackageOptions:
    """Arguments handed to ``generate_new_package`` when scaffolding a package."""

    package_name: str
    package_path: Path
    workspace_packages: tuple[PackageInfo, ...] = ()


PackageGenerator = Callable[
    [GenerateNewPackageOptions],
    Union[Mapping[str, Any], Awaitable[Mapping[str, Any]]],
]


@dataclass(frozen=True)
class WorkspaceMetaConfig:
    """The plugin list plus the optional hooks a workspace configures."""

    plugins: tuple[PluginCallable, ...] = ()
    formatter: Formatter | None = None
    generate_new_package: PackageGenerator | None = None
    include_root_package: bool = False
    source: Path | None = field(default=None, compare=False)


def define_config(
    *,
    plugins: Sequence[PluginCallable],
    formatter: Formatter | None = None,
    generate_new_package: PackageGenerator | None = None,
    include_root_package: bool = False,
) -> WorkspaceMetaConfig:
    """Build a validated configuration; intended for use inside ``config.py``."""

    return _validate(
        {
            "plugins": plugins,
            "formatter": formatter,
            "generate_new_package": generate_new_package,
            "include_root_package": include_root_package,
        }
    )


def _validate(raw: Mapping[str, Any], source: Path | None = None) -> WorkspaceMetaConfig:
    plugins = raw.get("plugins")
    if not isinstance(plugins, (list, tuple)):
        raise ValueError('Configuration must have a "plugins" list')
    if any(not callable(plugin) for plugin in plugins):
        raise ValueError("All plugins must be callable")

    generator = raw.get("generate_new_package")
    if generator is not None and not callable(generator):
        raise ValueError("generate_new_package must be callable")

    formatter = raw.get("formatter")
    if formatter is not None and not callable(formatter):
        raise ValueError("formatter must be callable")

    include_root = raw.get("include_root_package", False)
    if not isinstance(include_root, bool):
        raise ValueError("include_root_package must be a boolean")

    return WorkspaceMetaConfig(
        plugins=tuple(plugins),
        formatter=formatter,
        generate_new_package=generator,
        include_root_package=include_root,
        source=source,
    )


class ConfigLoader:
    """Find and import ``<config_dir>/config.py`` for a workspace."""

    def __init__(self, config_dir: Path | str) -> None:
        self.config_dir = Path(config_dir)

    def config_file_path(self) -> Path | None:
        for filename in CONFIG_FILE_NAMES:
            candidate = self.config_dir / filename
            if candidate.is_file():
                return candidate
        return None

    def has_config(self) -> bool:
        return self.config_file_path() is not None

    def load(self) -> WorkspaceMetaConfig | None:
        """Import the configuration module, or return None when there is none."""

        path = self.config_file_path()
        if path is None:
            logger.debug("no configuration file found in %s", self.config_dir)
            return None

        logger.debug("loading configuration from %s", path)
        try:
            module = self._import(path)
            if not hasattr(module, CONFIG_ATTRIBUTE):
                raise ValueError(
                    f"Configuration file must define a module-level `{CONFIG_ATTRIBUTE}`"
                )
            value = getattr(module, CONFIG_ATTRIBUTE)
            if isinstance(value, WorkspaceMetaConfig):
                return _validate(
                    {
                        "plugins": value.plugins,
                        "formatter": value.formatter,
                        "generate_new_package": value.generate_new_package,
                        "include_root_package": value.include_root_package,
                    },
                    source=path,
                )
            if isinstance(value, Mapping):
                return _validate(value, source=path)
            raise ValueError(
                f"`{CONFIG_ATTRIBUTE}` must be a WorkspaceMetaConfig or a mapping"
            )
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to load configuration from {path}: {exc}",
                "Check the configuration file for errors",
            ) from exc

    def load_required(self) -> WorkspaceMetaConfig:
        config = self.load()
        if config is None:
            raise ConfigurationError(
                "No workspace-meta configuration found", MISSING_CONFIG_HELP
            )
        return config

    @contextmanager
    def _insert_sys_path(self) -> Iterator[Path]:
        path = str(self.config_dir.resolve())
        already_present = path in sys.path
        if not already_present:
            sys.path.insert(0, path)
        try:
            yield self.config_dir
        finally:
            if not already_present and path in sys.path:
                sys.path.remove(path)

    def _import(self, path: Path) -> Any:
        module_name = f"_wsmeta_config_{abs(hash(str(path.resolve())))}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"unable to import {path}")
        module = importlib.util.module_from_spec(spec)
        with self._insert_sys_path():
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            finally:
                sys.modules.pop(module_name, None)
        return module
