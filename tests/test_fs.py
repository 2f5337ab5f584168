"""Tests for the package file access adapter."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from wsmeta_core.fs import (
    PackageFiles,
    normalize_relative_path,
    read_text_if_exists,
    write_json,
)


def test_read_returns_none_for_missing_file(tmp_path: Path) -> None:
    files = PackageFiles(tmp_path)
    assert asyncio.run(files.read("missing.txt")) is None


def test_read_returns_content(tmp_path: Path) -> None:
    (tmp_path / "README.md").write_text("# Test Package", encoding="utf-8")
    files = PackageFiles(tmp_path)
    assert asyncio.run(files.read("README.md")) == "# Test Package"


def test_read_keeps_windows_newlines(tmp_path: Path) -> None:
    (tmp_path / "crlf.txt").write_bytes(b"one\r\ntwo\r\n")
    assert read_text_if_exists(tmp_path / "crlf.txt") == "one\r\ntwo\r\n"


def test_read_propagates_other_errors(tmp_path: Path) -> None:
    (tmp_path / "folder").mkdir()
    files = PackageFiles(tmp_path)
    with pytest.raises(OSError):
        asyncio.run(files.read("folder"))


def test_write_creates_parent_directories(tmp_path: Path) -> None:
    files = PackageFiles(tmp_path)
    asyncio.run(files.write("src/index.ts", "export {};\n"))
    assert (tmp_path / "src" / "index.ts").read_text(encoding="utf-8") == "export {};\n"


def test_write_json_uses_two_space_indent(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "package.json"
    write_json(target, {"name": "p"})
    assert target.read_text(encoding="utf-8") == '{\n  "name": "p"\n}\n'
    assert json.loads(target.read_text(encoding="utf-8")) == {"name": "p"}


def test_read_replaces_bytes_that_are_not_utf8(tmp_path: Path) -> None:
    (tmp_path / "LICENSE").write_bytes(b"Copyright \xa9 2020\n")
    assert read_text_if_exists(tmp_path / "LICENSE") == "Copyright � 2020\n"


def test_resolve_keeps_rooted_paths_inside_package(tmp_path: Path) -> None:
    files = PackageFiles(tmp_path / "pkg")
    assert files.resolve("/etc/passwd") == tmp_path / "pkg" / "etc" / "passwd"
    assert files.resolve("src\\index.ts") == tmp_path / "pkg" / "src" / "index.ts"


def test_normalize_relative_path() -> None:
    assert normalize_relative_path("/a/b") == "a/b"
    assert normalize_relative_path("//a") == "a"
    assert normalize_relative_path("\\a\\b") == "a/b"
    assert normalize_relative_path("a/b") == "a/b"


def test_unencodable_write_leaves_existing_file_untouched(tmp_path: Path) -> None:
    (tmp_path / "x.txt").write_text("original", encoding="utf-8")
    files = PackageFiles(tmp_path)

    with pytest.raises(UnicodeEncodeError):
        asyncio.run(files.write("x.txt", "bad \ud800 content"))

    assert (tmp_path / "x.txt").read_text(encoding="utf-8") == "original"
