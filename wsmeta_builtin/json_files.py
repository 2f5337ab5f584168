"""Plugins that maintain JSON documents such as ``package.json``."""

from __future__ import annotations

import copy
import json
from typing import Any, Awaitable, Callable, Mapping, MutableMapping, Union

from wsmeta_core.plugin import PluginCallable, PluginContext

from ._util import resolve

__all__ = ["dump_json", "ensure_package_json", "update_json_file"]

PackageJsonUpdater = Callable[[MutableMapping[str, Any]], Union[Mapping[str, Any], None]]
JsonUpdater = Callable[
    [Any, PluginContext],
    Union[Any, Awaitable[Any]],
]


def dump_json(data: Any) -> str:
    """Serialize ``data`` the way npm tooling does: two spaces and a trailing newline."""

    return f"{json.dumps(data, indent=2, ensure_ascii=False)}\n"


def ensure_package_json(updater: PackageJsonUpdater) -> PluginCallable:
    """Rewrite ``package.json`` from the package's manifest passed through ``updater``.

    The updater receives a copy of the manifest; it may mutate it in place and
    return None, or return a replacement mapping.
    """

    async def plugin(ctx: PluginContext) -> None:
        package_json = copy.deepcopy(dict(ctx.package_json))
        result = updater(package_json)
        final = result if result is not None else package_json
        await ctx.write_file("package.json", dump_json(final))

    return plugin


def update_json_file(
    file_path: str,
    updater: JsonUpdater,
    default_content: Any = None,
) -> PluginCallable:
    """Read ``file_path`` as JSON, pass it through ``updater`` and write the result."""

    async def plugin(ctx: PluginContext) -> None:
        existing = await ctx.read_file(file_path)
        if existing:
            try:
                content = json.loads(existing)
            except ValueError as exc:
                raise ValueError(f"Failed to parse JSON file {file_path}") from exc
        else:
            content = copy.deepcopy(default_content) if default_content is not None else {}
        result = await resolve(updater, content, ctx)
        if result:
            await ctx.write_file(file_path, dump_json(result))

    return plugin
