"""In-memory registry of CLI commands."""

from __future__ import annotations

from vxp_core.errors import CommandCollisionError, UnknownCommandError

from .entry import FeatureEntry


class FeatureRegistry:
    """Map command names to their entries."""

    def __init__(self) -> None:
        self._entries: dict[str, FeatureEntry] = {}

    def register(self, entry: FeatureEntry) -> None:
        if entry.name in self._entries:
            raise CommandCollisionError(f"{entry.name} is already registered.")
        self._entries[entry.name] = entry

    def resolve(self, name: str) -> FeatureEntry:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownCommandError(f"{name} is not a vxp command.") from None

    def entries(self) -> tuple[FeatureEntry, ...]:
        return tuple(sorted(self._entries.values(), key=lambda entry: entry.name))
