"""Plugin-specific error types."""

from __future__ import annotations


class PluginError(Exception):
    """Base type for failures raised while running plugins."""


class DuplicateWriteError(PluginError):
    """Raised when a relative path is targeted twice in one package run."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"File '{path}' has already been targeted for writing in this operation"
        )
        self.path = path


class PluginExecutionError(PluginError):
    """Wraps any exception a plugin body raised."""

    PREFIX = "Plugin error"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"{self.PREFIX}: {cause}")
        self.cause = cause


class FormatterError(PluginError):
    """Raised by the formatter adapter when the configured formatter fails."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Formatter error for file {path}: {cause}")
        self.path = path
        self.cause = cause


class CommitWriteError(PluginError):
    """Raised when a staged write cannot be flushed to disk."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"Failed to write {path}: {cause}")
        self.path = path
        self.cause = cause
