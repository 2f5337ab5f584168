"""Interfaces plugin authors implement."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Awaitable, Callable, Union

if TYPE_CHECKING:
    from .context import PluginContext

PluginCallable = Callable[["PluginContext"], Union[None, Awaitable[None]]]


class Plugin(ABC):
    """Base interface for class-based plugins.

    The runner only ever calls a plugin with its context, so instances are
    interchangeable with plain functions and coroutine functions.
    """

    @abstractmethod
    def apply(self, context: "PluginContext") -> Union[None, Awaitable[None]]:
        """Inspect and write files for the package described by ``context``."""

    def __call__(self, context: "PluginContext") -> Union[None, Awaitable[None]]:
        return self.apply(context)
