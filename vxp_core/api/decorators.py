"""Decorator that marks vxp command classes with registry metadata."""

from __future__ import annotations

from typing import Any, Callable, Type

from .abc import VXPAbstractCommand

_CommandCandidate = Type[Any]

COMMAND_KIND = "command"


def _default_name(cls: type) -> str:
    return cls.__name__.removesuffix("Command").lower()


def vxpcommand(
    cls: _CommandCandidate | None = None,
    *,
    name: str | None = None,
) -> Callable[[_CommandCandidate], _CommandCandidate] | _CommandCandidate:
    """Attach ``__vxp_feature__`` metadata (kind and command name)."""

    def wrap(target: _CommandCandidate) -> _CommandCandidate:
        if not isinstance(target, type):
            raise TypeError("Decorated object must be a class.")
        if not issubclass(target, VXPAbstractCommand):
            raise TypeError(
                f"{target.__name__} must subclass VXPAbstractCommand to be registered as a command."
            )
        setattr(
            target,
            "__vxp_feature__",
            {"kind": COMMAND_KIND, "name": name or _default_name(target)},
        )
        return target

    if cls is None:
        return wrap
    return wrap(cls)
