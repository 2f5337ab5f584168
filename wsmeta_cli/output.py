"""Console output helpers for the workspace-meta CLI."""

from __future__ import annotations

import sys

from wsmeta_core.events import FORMATTER_ERROR_EVENT, Event, EventBus

PREFIX = "[workspace-meta]"


def info(message: str) -> None:
    print(f"{PREFIX} {message}")


def success(message: str) -> None:
    print(f"{PREFIX} ✓ {message}")


def warn(message: str) -> None:
    print(f"{PREFIX} ⚠ {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"{PREFIX} ✗ {message}", file=sys.stderr)


def attach(events: EventBus) -> None:
    """Print runner events that the command summaries do not cover."""

    def formatter_error(event: Event) -> None:
        payload = event.payload
        warn(
            f"{payload['package']}: formatter failed for {payload['path']}, "
            f"kept unformatted content ({payload['error']})"
        )

    events.on(FORMATTER_ERROR_EVENT, formatter_error)
