"""Registry entry describing one CLI command."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Type


@dataclass(frozen=True)
class FeatureEntry:
    name: str
    target: Type[Any]
    kind: str = "command"
    origin: str = "builtin"

    def __post_init__(self) -> None:
        for label in ("name", "kind", "origin"):
            if not getattr(self, label):
                raise ValueError(f"{label} cannot be empty.")
        if any(char.isspace() for char in self.name):
            raise ValueError("name may not contain whitespace.")
        if not isinstance(self.target, type):
            raise TypeError("target must be a class type.")

    @classmethod
    def from_target(cls, target: Type[Any], *, origin: str = "builtin") -> "FeatureEntry":
        metadata = getattr(target, "__vxp_feature__", None)
        if metadata is None:
            raise ValueError(f"{target.__name__} is not decorated with @vxpcommand")
        return cls(
            name=str(metadata["name"]),
            target=target,
            kind=str(metadata["kind"]),
            origin=origin,
        )

    @property
    def description(self) -> str:
        return (inspect.getdoc(self.target) or "").strip()
