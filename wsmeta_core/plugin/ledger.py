"""Per-package staging of proposed file writes."""

from __future__ import annotations

from typing import Iterator

from wsmeta_core.fs import normalize_relative_path

from .errors import DuplicateWriteError

__all__ = ["WriteLedger", "normalize_path"]


def normalize_path(relative_path: str) -> str:
    """Use forward slashes so ``a\\b`` and ``a/b`` name the same file.

    A leading root is dropped: ``/x`` targets ``x`` inside the package.
    """

    return normalize_relative_path(relative_path)


class WriteLedger:
    """Track which files a package run targeted and the writes pending commit.

    A path may be targeted at most once per run, whatever the content. There
    is no way to unstage or overwrite an entry.
    """

    def __init__(self) -> None:
        self._targeted: set[str] = set()
        self._order: list[str] = []
        self._pending: dict[str, str] = {}

    def claim(self, relative_path: str) -> str:
        """Mark ``relative_path`` as targeted and return its normalized key."""

        key = normalize_path(relative_path)
        if key in self._targeted:
            raise DuplicateWriteError(key)
        self._targeted.add(key)
        self._order.append(key)
        return key

    def propose(self, key: str, content: str) -> None:
        """Record pending content for a path previously returned by :meth:`claim`."""

        if key not in self._targeted:
            raise KeyError(f"{key!r} has not been claimed")
        if key in self._pending:
            raise DuplicateWriteError(key)
        self._pending[key] = content

    def stage(self, relative_path: str, content: str) -> str:
        """Claim ``relative_path`` and record its content in one step."""

        key = self.claim(relative_path)
        self.propose(key, content)
        return key

    def is_targeted(self, relative_path: str) -> bool:
        return normalize_path(relative_path) in self._targeted

    @property
    def targeted(self) -> tuple[str, ...]:
        return tuple(self._order)

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    def pending(self) -> Iterator[tuple[str, str]]:
        """Yield ``(path, content)`` for every staged write in staging order."""

        yield from self._pending.items()

    def __len__(self) -> int:
        return len(self._pending)
