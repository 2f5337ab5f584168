"""Tests for the formatter adapter."""

from __future__ import annotations

import asyncio
import logging

import pytest

from wsmeta_core.plugin import FormatterAdapter, FormatterError


def test_without_formatter_content_passes_through() -> None:
    adapter = FormatterAdapter()
    assert not adapter.enabled
    assert asyncio.run(adapter.format("hello", "/pkg/a.txt")) == "hello"


def test_sync_formatter_receives_path_hint() -> None:
    calls: list[tuple[str, str]] = []

    def formatter(content: str, filename: str) -> str:
        calls.append((content, filename))
        return content.upper()

    adapter = FormatterAdapter(formatter)
    assert asyncio.run(adapter.format("hello", "/pkg/a.txt")) == "HELLO"
    assert calls == [("hello", "/pkg/a.txt")]


def test_async_formatter_is_awaited() -> None:
    async def formatter(content: str, filename: str) -> str:
        await asyncio.sleep(0)
        return content[::-1]

    adapter = FormatterAdapter(formatter)
    assert asyncio.run(adapter.format("abc", "/pkg/a.txt")) == "cba"


def _failing_formatter(content: str, filename: str) -> str:
    raise RuntimeError("Formatter failed")


def test_failure_falls_back_and_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    adapter = FormatterAdapter(_failing_formatter)
    with caplog.at_level(logging.WARNING):
        assert asyncio.run(adapter.format("original", "/pkg/a.txt")) == "original"

    assert "Formatter error for file /pkg/a.txt: Formatter failed" in caplog.text


def test_failure_is_handed_to_error_handler(caplog: pytest.LogCaptureFixture) -> None:
    reported: list[FormatterError] = []

    adapter = FormatterAdapter(_failing_formatter, on_error=reported.append)
    with caplog.at_level(logging.WARNING):
        assert asyncio.run(adapter.format("original", "/pkg/a.txt")) == "original"

    assert caplog.records == []
    assert len(reported) == 1
    assert reported[0].path == "/pkg/a.txt"
    assert str(reported[0]) == "Formatter error for file /pkg/a.txt: Formatter failed"


def test_non_string_result_is_treated_as_failure() -> None:
    adapter = FormatterAdapter(lambda content, filename: None)
    assert asyncio.run(adapter.format("original", "/pkg/a.txt")) == "original"
