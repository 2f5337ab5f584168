"""Observer hooks for plugin runs.

The runner reports what happens to each package through an :class:`EventBus`
instead of printing. Subscribers register for one event name or for every
event and are called synchronously, highest priority first, in registration
order among equal priorities.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Callable

__all__ = [
    "Event",
    "EventHandler",
    "EventBus",
    "STANDARD_EVENTS",
    "PRE_PACKAGE_EVENT",
    "PLUGIN_ERROR_EVENT",
    "FORMATTER_ERROR_EVENT",
    "FILE_CHANGED_EVENT",
    "POST_PACKAGE_EVENT",
]

PRE_PACKAGE_EVENT = "runner.pre_package"
PLUGIN_ERROR_EVENT = "runner.plugin_error"
FORMATTER_ERROR_EVENT = "runner.formatter_error"
FILE_CHANGED_EVENT = "runner.file_changed"
POST_PACKAGE_EVENT = "runner.post_package"

STANDARD_EVENTS = (
    PRE_PACKAGE_EVENT,
    PLUGIN_ERROR_EVENT,
    FORMATTER_ERROR_EVENT,
    FILE_CHANGED_EVENT,
    POST_PACKAGE_EVENT,
)


@dataclass(frozen=True)
class Event:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[Event], None]


@dataclass(frozen=True, order=True)
class _Subscription:
    sort_key: tuple[int, int]
    event_name: str | None = field(compare=False)
    handler: EventHandler = field(compare=False)

    def matches(self, event_name: str) -> bool:
        return self.event_name is None or self.event_name == event_name


class EventBus:
    """Deliver run events to subscribers in a deterministic order."""

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []
        self._counter = 0

    def on(self, event_name: str, handler: EventHandler, priority: int = 0) -> None:
        """Call ``handler`` for every ``event_name`` event."""
        self._add(event_name, handler, priority)

    def on_any(self, handler: EventHandler, priority: int = 0) -> None:
        """Call ``handler`` for every event, including names outside STANDARD_EVENTS."""
        self._add(None, handler, priority)

    def off(self, handler: EventHandler) -> None:
        self._subscriptions = [
            subscription
            for subscription in self._subscriptions
            if subscription.handler is not handler
        ]

    def has_subscribers(self, event_name: str) -> bool:
        return any(subscription.matches(event_name) for subscription in self._subscriptions)

    def emit(self, event_name: str, payload: dict[str, Any]) -> Event:
        event = Event(event_name, payload)
        for subscription in tuple(self._subscriptions):
            if subscription.matches(event_name):
                subscription.handler(event)
        return event

    def _add(self, event_name: str | None, handler: EventHandler, priority: int) -> None:
        subscription = _Subscription((-priority, self._counter), event_name, handler)
        self._counter += 1
        bisect.insort(self._subscriptions, subscription)
