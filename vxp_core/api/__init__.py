"""Convenience imports for vxp command helpers."""

from .abc import VXPAbstractCommand
from .decorators import vxpcommand

__all__ = [
    "VXPAbstractCommand",
    "vxpcommand",
]
