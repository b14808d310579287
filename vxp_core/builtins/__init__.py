"""Registration of the built-in vxp commands."""

from __future__ import annotations

from typing import Sequence

from vxp_core.features import FeatureEntry, FeatureRegistry

from .commands import HelpCommand
from .publish import ListCommand, PackageCommand, PublishCommand, UnpublishCommand
from .publishers import ListPublishersCommand, LoginCommand, LogoutCommand

__all__ = ["register_builtin_commands"]

_BUILTIN_COMMANDS: Sequence[type] = (
    PackageCommand,
    PublishCommand,
    ListCommand,
    UnpublishCommand,
    LoginCommand,
    LogoutCommand,
    ListPublishersCommand,
    HelpCommand,
)


def register_builtin_commands(registry: FeatureRegistry) -> None:
    """Register the built-in command classes with the supplied registry."""

    for command in _BUILTIN_COMMANDS:
        registry.register(FeatureEntry.from_target(command, origin="builtin"))
