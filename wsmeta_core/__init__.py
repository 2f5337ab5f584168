"""Core runtime pieces for workspace-meta."""

from .app import GenerateReport, RunReport, WorkspaceMetaApp
from .config import (
    ConfigLoader,
    GenerateNewPackageOptions,
    WorkspaceMetaConfig,
    define_config,
)
from .discovery import PackageInfo, discover_packages
from .errors import (
    ConfigurationError,
    InvalidPackageNameError,
    WorkspaceMetaError,
    WorkspaceNotFoundError,
)
from .events import Event, EventBus
from .paths import UserDirs
from .plugin import (
    DuplicateWriteError,
    Plugin,
    PluginContext,
    PluginResult,
    PluginRunner,
    WriteLedger,
)
from .workspace import WorkspaceLayout, WorkspaceResolver

__all__ = [
    "WorkspaceMetaApp",
    "RunReport",
    "GenerateReport",
    "ConfigLoader",
    "GenerateNewPackageOptions",
    "WorkspaceMetaConfig",
    "define_config",
    "PackageInfo",
    "discover_packages",
    "WorkspaceMetaError",
    "ConfigurationError",
    "InvalidPackageNameError",
    "WorkspaceNotFoundError",
    "Event",
    "EventBus",
    "UserDirs",
    "DuplicateWriteError",
    "Plugin",
    "PluginContext",
    "PluginResult",
    "PluginRunner",
    "WriteLedger",
    "WorkspaceLayout",
    "WorkspaceResolver",
]
