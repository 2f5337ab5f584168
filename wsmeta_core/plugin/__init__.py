"""Plugin execution engine: context, staging ledger, formatter and runner."""

from .api import Plugin, PluginCallable
from .context import PluginContext
from .errors import (
    CommitWriteError,
    DuplicateWriteError,
    FormatterError,
    PluginError,
    PluginExecutionError,
)
from .formatter import Formatter, FormatterAdapter
from .ledger import WriteLedger, normalize_path
from .runner import PluginResult, PluginRunner

__all__ = [
    "Plugin",
    "PluginCallable",
    "PluginContext",
    "PluginResult",
    "PluginRunner",
    "WriteLedger",
    "normalize_path",
    "Formatter",
    "FormatterAdapter",
    "PluginError",
    "DuplicateWriteError",
    "PluginExecutionError",
    "FormatterError",
    "CommitWriteError",
]
