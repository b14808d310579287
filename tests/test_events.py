"""Unit tests for the vxp EventBus."""

import pytest

from vxp_core.events import PIPELINE_EVENTS, EventBus


def test_event_handlers_run_in_priority_order() -> None:
    bus = EventBus()
    seen: list[str] = []

    def make_handler(label: str):
        def handler(event):
            seen.append(f"{label}:{event.payload['id']}")

        return handler

    bus.on("published", make_handler("one"))
    bus.on("published", make_handler("two"))
    bus.on("published", make_handler("high"), priority=5)
    bus.on("published", make_handler("low"), priority=-1)
    delivered = bus.emit("published", {"id": "acme.tool"})

    assert delivered == 4
    assert seen == ["high:acme.tool", "one:acme.tool", "two:acme.tool", "low:acme.tool"]


def test_off_removes_handler() -> None:
    bus = EventBus()
    recorded: list[str] = []

    def handler(event):
        recorded.append(event.name)

    bus.on("unpublished", handler)
    bus.off("unpublished", handler)
    assert bus.emit("unpublished") == 0
    assert recorded == []


def test_payload_is_copied_per_emit() -> None:
    bus = EventBus()
    payloads = []
    bus.on("listed", lambda event: payloads.append(event.payload))
    original = {"line": "tool @ 1.0.0"}
    bus.emit("listed", original)
    original["line"] = "changed"
    assert payloads == [{"line": "tool @ 1.0.0"}]


def test_unknown_events_rejected_when_strict() -> None:
    with pytest.raises(ValueError):
        EventBus().emit("shutdown")
    with pytest.raises(ValueError):
        EventBus().on("shutdown", lambda event: None)
    assert EventBus(strict=False).emit("shutdown") == 0


def test_pipeline_events_are_listed() -> None:
    assert PIPELINE_EVENTS == ("packaged", "published", "listed", "unpublished")
