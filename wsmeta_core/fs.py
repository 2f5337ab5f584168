"""Filesystem helpers bound to a single package directory."""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any

__all__ = ["PackageFiles", "normalize_relative_path", "read_text_if_exists", "write_json"]


def normalize_relative_path(relative_path: str) -> str:
    """Use forward slashes and drop any leading root so the path stays package-relative."""

    normalized = relative_path.replace("\\", "/")
    anchor = PurePosixPath(normalized).anchor
    return normalized[len(anchor):] if anchor else normalized


def read_text_if_exists(path: Path) -> str | None:
    """Return the file content, or None when the file does not exist.

    Every other I/O failure propagates. Newlines are kept as stored so the
    value can be compared with proposed content; bytes that are not UTF-8
    decode to replacement characters.
    """

    try:
        with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None


def write_json(path: Path, data: Any, *, indent: int = 2) -> None:
    """Write ``data`` as indented JSON with a trailing newline, creating parents."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{json.dumps(data, indent=indent)}\n", encoding="utf-8")


class PackageFiles:
    """Read and write files relative to one package's absolute path."""

    def __init__(self, package_path: Path | str) -> None:
        self.package_path = Path(package_path)

    def resolve(self, relative_path: str) -> Path:
        return self.package_path / normalize_relative_path(relative_path)

    async def read(self, relative_path: str) -> str | None:
        return read_text_if_exists(self.resolve(relative_path))

    async def write(self, relative_path: str, content: str) -> None:
        # Encode first: an unencodable string must not truncate the existing file.
        data = content.encode("utf-8")
        target = self.resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
