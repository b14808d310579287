"""Abstract base class for vxp commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vxp_core.app import VXPApp


class VXPAbstractCommand(ABC):
    """Base interface for vxp commands.

    Commands receive the application so they can reach settings, the event
    bus, the publisher store and the gallery factory without touching
    process-wide state themselves.
    """

    def __init__(self, app: "VXPApp | None" = None) -> None:
        self.app = app

    @classmethod
    @abstractmethod
    def configure(cls, parser: ArgumentParser) -> None:
        """Let the command configure CLI arguments."""

    @abstractmethod
    def run(self, args: Namespace) -> int:
        """Execute the command with parsed arguments."""
