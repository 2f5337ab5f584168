"""Workspace helpers that locate the monorepo root and resolve tool settings."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import tomllib

from .errors import WorkspaceNotFoundError
from .paths import UserDirs

DEFAULT_CONFIG_DIR = ".workspace-meta"
SETTINGS_FILE_NAME = "settings.toml"

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"
LERNA_FILE = "lerna.json"
PACKAGE_JSON_FILE = "package.json"

logger = logging.getLogger(__name__)

_DEFAULTS: dict[str, str] = {
    "config_dir": DEFAULT_CONFIG_DIR,
    "log_level": "WARNING",
}
_ENV_KEY_MAP: dict[str, str] = {
    "config_dir": "WORKSPACE_META_DIR",
    "log_level": "WORKSPACE_META_LOG_LEVEL",
}


def _load_settings_from_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable settings file %s: %s", path, exc)
        return {}
    return {key: str(value) for key, value in data.items()}


def _declares_workspaces(package_json_path: Path) -> bool:
    try:
        data = json.loads(package_json_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False
    return isinstance(data, dict) and "workspaces" in data


def is_workspace_root(directory: Path) -> bool:
    """Return True when ``directory`` holds a monorepo workspace manifest."""

    if (directory / PNPM_WORKSPACE_FILE).is_file():
        return True
    if (directory / LERNA_FILE).is_file():
        return True
    package_json = directory / PACKAGE_JSON_FILE
    return package_json.is_file() and _declares_workspaces(package_json)


@dataclass(frozen=True)
class WorkspaceLayout:
    """Locations workspace-meta reads from inside a monorepo root."""

    root: Path
    config_dir: Path
    settings_file: Path

    @classmethod
    def from_root(cls, root: Path, config_dir_name: str = DEFAULT_CONFIG_DIR) -> "WorkspaceLayout":
        root = root.resolve()
        config_dir = root / config_dir_name
        return cls(
            root=root,
            config_dir=config_dir,
            settings_file=config_dir / SETTINGS_FILE_NAME,
        )

    def ensure(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class WorkspaceResolver:
    """Resolve monorepo roots and tool settings while honoring layered configuration."""

    user_dirs: UserDirs | None = None
    cli_overrides: Mapping[str, str] | None = None
    env: Mapping[str, str] | None = None
    defaults: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        self.user_dirs = self.user_dirs or UserDirs()
        self.cli_overrides = {
            key: value for key, value in dict(self.cli_overrides or {}).items() if value
        }
        self.env = self.env if self.env is not None else os.environ
        base_defaults = dict(_DEFAULTS)
        if self.defaults:
            base_defaults.update(self.defaults)
        self.defaults = base_defaults

    # ---------- Public API ----------

    def find_workspace_root(self, start_dir: Path | None = None) -> Path | None:
        """Walk from ``start_dir`` upward and return the first monorepo root."""
        start = (Path(start_dir) if start_dir else Path.cwd()).resolve()
        for current in (start, *start.parents):
            if is_workspace_root(current):
                return current
        return None

    def require_workspace_root(self, start_dir: Path | None = None) -> Path:
        root = self.find_workspace_root(start_dir)
        if root is None:
            start = Path(start_dir) if start_dir else Path.cwd()
            raise WorkspaceNotFoundError(
                f"No workspace root found from {start}",
                "Run workspace-meta inside a monorepo (pnpm-workspace.yaml, "
                "lerna.json or a package.json with `workspaces`)",
            )
        return root

    def layout(self, root: Path) -> WorkspaceLayout:
        config_dir_name = self.resolve_setting("config_dir", root) or DEFAULT_CONFIG_DIR
        return WorkspaceLayout.from_root(root, config_dir_name)

    def resolve_setting(self, key: str, start_dir: Path | None = None) -> str | None:
        """Return the value for `key` using CLI, env, workspace, user, defaults order."""
        if value := self.cli_overrides.get(key):
            return value
        if value := self._env_value(key):
            return value
        workspace_layer = self._workspace_settings_layer(start_dir)
        if (value := workspace_layer.get(key)):
            return value
        user_layer = self._user_settings_layer()
        if (value := user_layer.get(key)):
            return value
        return self.defaults.get(key)

    # ---------- Internal helpers ----------

    def _env_value(self, key: str) -> str | None:
        alias = _ENV_KEY_MAP.get(key)
        if alias:
            return self.env.get(alias)
        return None

    def _workspace_settings_layer(self, start_dir: Path | None) -> dict[str, str]:
        root = self.find_workspace_root(start_dir)
        if root is None:
            return {}
        config_dir_name = (
            self.cli_overrides.get("config_dir")
            or self._env_value("config_dir")
            or self.defaults["config_dir"]
        )
        return _load_settings_from_file(WorkspaceLayout.from_root(root, config_dir_name).settings_file)

    def _user_settings_layer(self) -> dict[str, str]:
        return _load_settings_from_file(self.user_dirs.config_dir() / SETTINGS_FILE_NAME)
