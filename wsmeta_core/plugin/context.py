"""Runtime context shared with plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

from wsmeta_core.discovery import PackageInfo

ReadFile = Callable[[str], Awaitable["str | None"]]
WriteFile = Callable[[str, str], Awaitable[None]]


@dataclass(frozen=True)
class PluginContext:
    """Everything a plugin sees while it runs against one package."""

    workspace_path: Path
    package_path: Path
    package_name: str
    package_json: Mapping[str, Any]
    config_directory: Path
    workspace_packages: tuple[PackageInfo, ...]
    is_check_mode: bool
    read_file: ReadFile
    write_file: WriteFile
    logger: logging.Logger
