"""vxp CLI entrypoint backed by the command registry."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Sequence

from vxp_core.app import VXPApp
from vxp_core.config import load_settings
from vxp_core.errors import UnknownCommandError, UserAbortedError, VxpError

CLI_VERSION = "0.1.0"
LOG_LEVEL_ENV = "VXP_LOG_LEVEL"


def main(
    argv: Sequence[str] | None = None,
    *,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    app: VXPApp | None = None,
) -> int:
    """Resolve and run a vxp command, returning the process exit code."""

    env = os.environ if env is None else env
    tokens = list(argv) if argv is not None else list(sys.argv[1:])
    level = env.get(LOG_LEVEL_ENV, "WARNING")
    if tokens[:1] == ["--log-level"] and len(tokens) > 1:
        level, tokens = tokens[1], tokens[2:]
    _configure_logging(level)

    if tokens[:1] == ["--version"]:
        print(f"vxp v{CLI_VERSION}")
        return 0
    if not tokens or tokens[0] in ("-h", "--help"):
        tokens = ["help"]

    command_name, command_args = tokens[0], tokens[1:]
    if app is None:
        try:
            app = VXPApp(cwd=Path(cwd) if cwd else Path.cwd(), settings=load_settings(env=env))
        except VxpError as exc:
            print(f"[vxp:{command_name}] error: {exc}")
            return 1
    app.bootstrap()
    registry = app.feature_registry

    try:
        entry = registry.resolve(command_name)
    except UnknownCommandError as exc:
        print(str(exc))
        return 1

    parser = argparse.ArgumentParser(
        prog=f"vxp {entry.name}",
        description=entry.description,
    )
    entry.target.configure(parser)
    try:
        parsed_args = parser.parse_args(command_args)
    except SystemExit as exc:
        return _exit_code(exc.code)

    command = entry.target(app)
    try:
        result = command.run(parsed_args)
    except UserAbortedError as exc:
        print(f"[vxp:{entry.name}] {str(exc).lower()}")
        return 1
    except VxpError as exc:
        logging.getLogger("vxp_cli").debug("command %s failed", entry.name, exc_info=True)
        print(f"[vxp:{entry.name}] error: {exc}")
        return 1
    return to_int(result)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def to_int(result: int | None) -> int:
    return 0 if result is None else result
