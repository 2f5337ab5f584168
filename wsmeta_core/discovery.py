"""Discover the member packages of a JavaScript monorepo."""

from __future__ import annotations

import fnmatch
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath
from typing import Any, Iterable, Mapping, Sequence

import yaml

from .errors import ConfigurationError
from .workspace import LERNA_FILE, PACKAGE_JSON_FILE, PNPM_WORKSPACE_FILE

__all__ = ["PackageInfo", "discover_packages", "read_workspace_patterns"]

logger = logging.getLogger(__name__)

_IGNORED_DIRS = frozenset({"node_modules", ".git"})
_PATTERN_HELP = "Workspace patterns must be relative to the workspace root and stay inside it"


@dataclass(frozen=True)
class PackageInfo:
    """One workspace member: its name, absolute path and parsed manifest."""

    name: str
    path: Path
    package_json: Mapping[str, Any] = field(default_factory=dict)


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _as_patterns(value: Any) -> list[str]:
    if isinstance(value, Mapping):
        value = value.get("packages")
    if not isinstance(value, Sequence) or isinstance(value, str):
        return []
    return [str(item) for item in value if isinstance(item, str) and item.strip()]


def read_workspace_patterns(workspace_path: Path) -> list[str] | None:
    """Return the member globs declared by the workspace, or None when it declares none."""

    pnpm_file = workspace_path / PNPM_WORKSPACE_FILE
    if pnpm_file.is_file():
        try:
            document = yaml.safe_load(pnpm_file.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Failed to parse {pnpm_file}: {exc}",
                f"Fix the YAML syntax in {PNPM_WORKSPACE_FILE}",
            ) from exc
        if isinstance(document, Mapping):
            return _as_patterns(document.get("packages"))
        return []

    package_json = workspace_path / PACKAGE_JSON_FILE
    if package_json.is_file():
        try:
            data = _load_json(package_json)
        except ValueError as exc:
            logger.warning("ignoring invalid %s: %s", package_json, exc)
            data = None
        if isinstance(data, Mapping) and "workspaces" in data:
            return _as_patterns(data["workspaces"])

    lerna_file = workspace_path / LERNA_FILE
    if lerna_file.is_file():
        try:
            data = _load_json(lerna_file)
        except ValueError as exc:
            logger.warning("ignoring invalid %s: %s", lerna_file, exc)
            data = None
        if isinstance(data, Mapping):
            return _as_patterns(data.get("packages", ["packages/*"]))

    return None


def _check_pattern(pattern: str) -> str:
    posix = pattern.replace("\\", "/")
    if posix.startswith("/") or PureWindowsPath(pattern).anchor or ".." in posix.split("/"):
        raise ConfigurationError(
            f"Invalid workspace pattern: {pattern}",
            _PATTERN_HELP,
        )
    return pattern


def _expand(workspace_path: Path, patterns: Iterable[str]) -> list[Path]:
    includes: list[str] = []
    excludes: list[str] = []
    for pattern in patterns:
        cleaned = pattern.strip().rstrip("/")
        if cleaned.startswith("!"):
            excludes.append(_check_pattern(cleaned[1:].removeprefix("./")))
        elif cleaned:
            includes.append(_check_pattern(cleaned.removeprefix("./")))

    seen: set[Path] = set()
    directories: list[Path] = []
    for pattern in includes:
        try:
            candidates = sorted(workspace_path.glob(pattern))
        except (NotImplementedError, ValueError) as exc:
            raise ConfigurationError(
                f"Invalid workspace pattern: {pattern} ({exc})", _PATTERN_HELP
            ) from exc
        for candidate in candidates:
            if not candidate.is_dir() or candidate in seen:
                continue
            relative = candidate.relative_to(workspace_path)
            if _IGNORED_DIRS.intersection(relative.parts):
                continue
            if any(fnmatch.fnmatch(relative.as_posix(), excluded) for excluded in excludes):
                continue
            seen.add(candidate)
            directories.append(candidate)
    return directories


def _read_package(directory: Path) -> PackageInfo | None:
    manifest = directory / PACKAGE_JSON_FILE
    if not manifest.is_file():
        return None
    try:
        data = _load_json(manifest)
    except ValueError as exc:
        logger.warning("skipping %s: invalid package.json (%s)", directory, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("skipping %s: package.json is not an object", directory)
        return None
    name = data.get("name") or str(directory)
    return PackageInfo(name=str(name), path=directory, package_json=data)


def _matches_glob(workspace_path: Path, package: PackageInfo, glob: str) -> bool:
    if fnmatch.fnmatchcase(package.name, glob):
        return True
    try:
        relative = package.path.relative_to(workspace_path).as_posix()
    except ValueError:
        return False
    return fnmatch.fnmatchcase(relative, glob)


def discover_packages(
    workspace_path: Path | str,
    package_glob: str | None = None,
    *,
    include_root_package: bool = False,
) -> list[PackageInfo]:
    """Return workspace members sorted by absolute path."""

    root = Path(workspace_path).resolve()
    patterns = read_workspace_patterns(root)
    if patterns is None:
        return []

    packages: list[PackageInfo] = []
    directories = _expand(root, patterns)
    if include_root_package and root not in directories:
        directories.insert(0, root)
    for directory in directories:
        package = _read_package(directory)
        if package is None:
            continue
        if package_glob and not _matches_glob(root, package, package_glob):
            continue
        packages.append(package)

    return sorted(packages, key=lambda package: str(package.path))
