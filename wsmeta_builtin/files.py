"""Plugins that keep plain text files in place."""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, Callable, Union

from wsmeta_core.plugin import PluginCallable, PluginContext

from ._util import resolve

__all__ = ["conditional_file", "ensure_file", "ensure_file_from"]

ContentFactory = Callable[[PluginContext], Union[str, None, Awaitable[Union[str, None]]]]
Condition = Callable[[PluginContext], Union[bool, Awaitable[bool]]]


def ensure_file(file_path: str, content: Union[str, ContentFactory]) -> PluginCallable:
    """Ensure ``file_path`` exists with ``content``.

    ``content`` may be a callable receiving the context; when it resolves to
    an empty value nothing is written.
    """

    async def plugin(ctx: PluginContext) -> None:
        final_content = await resolve(content, ctx)
        if final_content:
            await ctx.write_file(file_path, final_content)

    return plugin


def ensure_file_from(file_path: str, template_path: str) -> PluginCallable:
    """Ensure ``file_path`` matches a template stored relative to the config directory."""

    async def plugin(ctx: PluginContext) -> None:
        absolute_template = (Path(ctx.config_directory) / template_path).resolve()
        try:
            content = absolute_template.read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(
                f'Failed to read template file "{template_path}" from config directory: {exc}'
            ) from exc
        await ctx.write_file(file_path, content)

    return plugin


def conditional_file(
    condition: Condition,
    file_path: str,
    content: Union[str, ContentFactory],
) -> PluginCallable:
    """Write ``file_path`` only for packages where ``condition`` holds."""

    async def plugin(ctx: PluginContext) -> None:
        if await resolve(condition, ctx):
            final_content = await resolve(content, ctx)
            await ctx.write_file(file_path, final_content)

    return plugin
