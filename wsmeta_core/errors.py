"""Errors surfaced to workspace-meta users."""

from __future__ import annotations


class WorkspaceMetaError(Exception):
    """Base type for user-visible failures, optionally carrying a remediation hint."""

    def __init__(self, message: str, help_message: str | None = None) -> None:
        super().__init__(message)
        self.help_message = help_message


class ConfigurationError(WorkspaceMetaError):
    """Raised when the workspace configuration is missing or malformed."""


class WorkspaceNotFoundError(WorkspaceMetaError):
    """Raised when no monorepo root can be located."""


class InvalidPackageNameError(WorkspaceMetaError):
    """Raised when a package name does not follow npm naming rules."""
