"""Adapter around the optional user-supplied content formatter."""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Awaitable, Callable, Union

from .errors import FormatterError

Formatter = Callable[[str, str], Union[str, Awaitable[str]]]
FormatterErrorHandler = Callable[[FormatterError], None]


class FormatterAdapter:
    """Apply a formatter to proposed content, never letting it fail a run."""

    def __init__(
        self,
        formatter: Formatter | None = None,
        *,
        logger: logging.Logger | None = None,
        on_error: FormatterErrorHandler | None = None,
    ) -> None:
        self.formatter = formatter
        self._logger = logger or logging.getLogger(__name__)
        self._on_error = on_error

    @property
    def enabled(self) -> bool:
        return self.formatter is not None

    async def format(self, content: str, file_path: Path | str) -> str:
        """Return formatted content, or ``content`` unchanged when formatting fails."""

        if self.formatter is None:
            return content
        try:
            formatted = self.formatter(content, str(file_path))
            if inspect.isawaitable(formatted):
                formatted = await formatted
            if not isinstance(formatted, str):
                raise TypeError(
                    f"formatter returned {type(formatted).__name__}, expected str"
                )
        except Exception as exc:
            error = FormatterError(str(file_path), exc)
            if self._on_error is None:
                self._logger.warning("%s", error)
            else:
                self._logger.debug("%s", error)
                self._on_error(error)
            return content
        return formatted
