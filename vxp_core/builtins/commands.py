"""Shared command plumbing and the help listing."""

from __future__ import annotations

from argparse import ArgumentParser, Namespace

from vxp_core.api import VXPAbstractCommand, vxpcommand


class _AppCommand(VXPAbstractCommand):
    """Commands that need the wired application."""

    prefix = "vxp"

    def _require_app(self):
        if self.app is None:
            raise RuntimeError(f"{type(self).__name__} requires a VXPApp")
        return self.app

    def _say(self, message: str) -> None:
        print(f"[vxp:{self.prefix}] {message}")


@vxpcommand(name="help")
class HelpCommand(_AppCommand):
    """Display the list of available commands."""

    @classmethod
    def configure(cls, parser: ArgumentParser) -> None:
        parser.add_argument(
            "--long",
            action="store_true",
            dest="long_format",
            help="Show the full description of each command.",
        )

    def run(self, args: Namespace) -> int:
        registry = self._require_app().feature_registry
        long_format = bool(getattr(args, "long_format", False))
        print("Usage: vxp <command> [args...]\n")
        print("Commands:")
        for entry in registry.entries():
            lines = entry.description.splitlines()
            short = lines[0] if lines else ""
            print(f"  {entry.name:<16} {short}")
            if long_format:
                for extra in lines[1:]:
                    print(f"    {extra}" if extra else "")
        return 0
