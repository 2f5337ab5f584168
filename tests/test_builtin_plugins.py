"""Tests for the built-in plugins and formatters."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from wsmeta_builtin import (
    conditional_file,
    ensure_file,
    ensure_file_from,
    ensure_package_json,
    json_formatter,
    prettier_formatter,
    update_json_file,
)
from wsmeta_core.config import WorkspaceMetaConfig
from wsmeta_core.discovery import PackageInfo
from wsmeta_core.plugin import PluginContext, PluginResult, PluginRunner


def _package(tmp_path: Path, **manifest) -> PackageInfo:
    path = tmp_path / "packages" / "pkg"
    path.mkdir(parents=True, exist_ok=True)
    return PackageInfo(name="pkg", path=path, package_json={"name": "pkg", **manifest})


def _sync(tmp_path: Path, package: PackageInfo, *plugins) -> PluginResult:
    runner = PluginRunner(
        tmp_path,
        WorkspaceMetaConfig(plugins=plugins),
        config_directory=tmp_path / ".workspace-meta",
    )
    return asyncio.run(runner.run_for_package(package, is_check_mode=False))


def test_ensure_file_writes_static_content(tmp_path: Path) -> None:
    package = _package(tmp_path)
    result = _sync(tmp_path, package, ensure_file(".npmrc", "save-exact=true\n"))

    assert result.files_changed == (".npmrc",)
    assert (package.path / ".npmrc").read_text(encoding="utf-8") == "save-exact=true\n"


def test_ensure_file_skips_empty_factory_result(tmp_path: Path) -> None:
    package = _package(tmp_path)
    result = _sync(tmp_path, package, ensure_file("README.md", lambda ctx: None))

    assert result.files_changed == ()
    assert not (package.path / "README.md").exists()


def test_ensure_file_accepts_async_factory(tmp_path: Path) -> None:
    package = _package(tmp_path)

    async def readme(ctx: PluginContext) -> str:
        return f"# {ctx.package_name}\n"

    _sync(tmp_path, package, ensure_file("README.md", readme))

    assert (package.path / "README.md").read_text(encoding="utf-8") == "# pkg\n"


def test_ensure_file_from_reads_template_from_config_directory(tmp_path: Path) -> None:
    package = _package(tmp_path)
    templates = tmp_path / ".workspace-meta" / "templates"
    templates.mkdir(parents=True)
    (templates / "tsconfig.json").write_text('{"extends": "../../tsconfig.base.json"}\n')

    result = _sync(tmp_path, package, ensure_file_from("tsconfig.json", "templates/tsconfig.json"))

    assert result.files_changed == ("tsconfig.json",)
    assert (package.path / "tsconfig.json").read_text(encoding="utf-8") == (
        '{"extends": "../../tsconfig.base.json"}\n'
    )


def test_ensure_file_from_reports_missing_template(tmp_path: Path) -> None:
    package = _package(tmp_path)
    result = _sync(tmp_path, package, ensure_file_from("a.txt", "missing.txt"))

    assert len(result.errors) == 1
    assert result.errors[0].startswith(
        'Plugin error: Failed to read template file "missing.txt" from config directory:'
    )


def test_conditional_file_respects_condition(tmp_path: Path) -> None:
    package = _package(tmp_path, private=True)
    result = _sync(
        tmp_path,
        package,
        conditional_file(lambda ctx: ctx.package_json.get("private"), "PRIVATE", "yes\n"),
        conditional_file(lambda ctx: False, "NEVER", "no\n"),
    )

    assert result.files_changed == ("PRIVATE",)
    assert not (package.path / "NEVER").exists()


def test_ensure_package_json_applies_updater(tmp_path: Path) -> None:
    package = _package(tmp_path, version="1.0.0")

    def add_license(package_json):
        package_json["license"] = "MIT"

    _sync(tmp_path, package, ensure_package_json(add_license))

    written = (package.path / "package.json").read_text(encoding="utf-8")
    assert written == '{\n  "name": "pkg",\n  "version": "1.0.0",\n  "license": "MIT"\n}\n'
    assert "license" not in package.package_json


def test_ensure_package_json_uses_returned_mapping(tmp_path: Path) -> None:
    package = _package(tmp_path)
    _sync(tmp_path, package, ensure_package_json(lambda package_json: {"name": "renamed"}))

    assert json.loads((package.path / "package.json").read_text(encoding="utf-8")) == {
        "name": "renamed"
    }


def test_update_json_file_merges_existing_content(tmp_path: Path) -> None:
    package = _package(tmp_path)
    (package.path / "tsconfig.json").write_text('{"compilerOptions": {}}', encoding="utf-8")

    def strict(content, ctx):
        content["compilerOptions"]["strict"] = True
        return content

    _sync(tmp_path, package, update_json_file("tsconfig.json", strict))

    assert json.loads((package.path / "tsconfig.json").read_text(encoding="utf-8")) == {
        "compilerOptions": {"strict": True}
    }


def test_update_json_file_uses_default_when_missing(tmp_path: Path) -> None:
    package = _package(tmp_path)

    async def add_name(content, ctx):
        return {**content, "name": ctx.package_name}

    _sync(tmp_path, package, update_json_file("meta.json", add_name, {"kind": "lib"}))

    assert json.loads((package.path / "meta.json").read_text(encoding="utf-8")) == {
        "kind": "lib",
        "name": "pkg",
    }


def test_update_json_file_reports_invalid_json(tmp_path: Path) -> None:
    package = _package(tmp_path)
    (package.path / "broken.json").write_text("{ nope", encoding="utf-8")

    result = _sync(tmp_path, package, update_json_file("broken.json", lambda content, ctx: content))

    assert result.errors == ("Plugin error: Failed to parse JSON file broken.json",)


def test_update_json_file_skips_empty_result(tmp_path: Path) -> None:
    package = _package(tmp_path)
    result = _sync(tmp_path, package, update_json_file("meta.json", lambda content, ctx: None))

    assert result.files_changed == ()


def test_json_formatter_reindents_json_only() -> None:
    assert json_formatter('{"a":1}', "/pkg/package.json") == '{\n  "a": 1\n}\n'
    assert json_formatter("x=1", "/pkg/.npmrc") == "x=1"
    with pytest.raises(ValueError):
        json_formatter("{ nope", "/pkg/broken.json")


def test_prettier_formatter_passes_through_without_prettier(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr("wsmeta_builtin.formatters.shutil.which", lambda name: None)
    assert prettier_formatter("const a=1", "/pkg/index.js") == "const a=1"
