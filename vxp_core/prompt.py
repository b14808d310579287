"""Interactive prompts."""

from __future__ import annotations

import getpass
from typing import Callable

Reader = Callable[[str], str]


def read(prompt: str) -> str:
    """Ask ``prompt`` on the terminal and return the stripped answer."""

    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def read_secret(prompt: str) -> str:
    try:
        return getpass.getpass(prompt).strip()
    except EOFError:
        return ""
