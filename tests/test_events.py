"""Unit tests for the runner EventBus."""

from wsmeta_core.events import STANDARD_EVENTS, EventBus


def test_event_handlers_run_in_priority_order() -> None:
    bus = EventBus()
    seen: list[str] = []

    def make_handler(label: str):
        def handler(event):
            seen.append(f"{label}:{event.payload['value']}")

        return handler

    bus.on("runner.pre_package", make_handler("one"), priority=0)
    bus.on("runner.pre_package", make_handler("two"), priority=0)
    bus.on("runner.pre_package", make_handler("high"), priority=5)
    bus.on("runner.pre_package", make_handler("low"), priority=-1)
    bus.emit("runner.pre_package", {"value": "ok"})

    assert seen == ["high:ok", "one:ok", "two:ok", "low:ok"]


def test_on_any_receives_every_event_in_priority_order() -> None:
    bus = EventBus()
    recorded: list[str] = []

    bus.on("custom", lambda event: recorded.append("named"))
    bus.on_any(lambda event: recorded.append(event.name), priority=1)
    for name in STANDARD_EVENTS:
        bus.emit(name, {})
    bus.emit("custom", {})

    assert recorded == [*STANDARD_EVENTS, "custom", "named"]


def test_handlers_only_see_their_event() -> None:
    bus = EventBus()
    recorded: list[str] = []

    bus.on("runner.file_changed", lambda event: recorded.append(event.payload["path"]))
    bus.emit("runner.pre_package", {"package": "a"})
    event = bus.emit("runner.file_changed", {"path": "package.json"})

    assert recorded == ["package.json"]
    assert event.name == "runner.file_changed"


def test_off_removes_handler() -> None:
    bus = EventBus()
    recorded: list[str] = []

    def handler(event) -> None:
        recorded.append(event.name)

    bus.on("runner.post_package", handler)
    bus.on_any(handler)
    bus.off(handler)
    bus.emit("runner.post_package", {})

    assert recorded == []


def test_standard_events_are_listed() -> None:
    assert STANDARD_EVENTS == (
        "runner.pre_package",
        "runner.plugin_error",
        "runner.formatter_error",
        "runner.file_changed",
        "runner.post_package",
    )
