"""Synchronous event bus the pipeline uses to report completed steps."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict

__all__ = ["Event", "EventHandler", "EventBus", "PIPELINE_EVENTS"]

PIPELINE_EVENTS = (
    "packaged",
    "published",
    "listed",
    "unpublished",
)


@dataclass(frozen=True)
class Event:
    name: str
    payload: dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[Event], None]


class EventBus:
    """Deliver events to handlers by descending priority, then registration order."""

    def __init__(self, *, strict: bool = True) -> None:
        self.strict = strict
        self._handlers: DefaultDict[str, list[tuple[int, int, EventHandler]]] = defaultdict(list)
        self._order = 0

    def on(self, event_name: str, handler: EventHandler, priority: int = 0) -> None:
        self._check(event_name)
        self._order += 1
        self._handlers[event_name].append((-priority, self._order, handler))
        self._handlers[event_name].sort(key=lambda item: item[:2])

    def off(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name] = [
            item for item in self._handlers[event_name] if item[2] is not handler
        ]

    def emit(self, event_name: str, payload: dict[str, Any] | None = None) -> int:
        """Deliver ``event_name`` and return how many handlers received it."""
        self._check(event_name)
        event = Event(event_name, dict(payload or {}))
        handlers = list(self._handlers[event_name])
        for _, _, handler in handlers:
            handler(event)
        return len(handlers)

    def _check(self, event_name: str) -> None:
        if self.strict and event_name not in PIPELINE_EVENTS:
            raise ValueError(f"unknown event {event_name!r}")
