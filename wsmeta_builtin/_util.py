"""Shared helpers for the built-in plugins."""

from __future__ import annotations

import inspect
from typing import Any


async def resolve(value: Any, *args: Any) -> Any:
    """Call ``value`` with ``args`` when callable and await the outcome if needed."""

    if callable(value):
        value = value(*args)
    if inspect.isawaitable(value):
        value = await value
    return value
