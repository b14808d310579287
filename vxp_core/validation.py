"""Identifier validation for publishers and extension names."""

from __future__ import annotations

import re

from .errors import ValidationError

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9\-]*$", re.IGNORECASE)


def _validate(label: str, value: str | None) -> str:
    if not value:
        raise ValidationError(f"{label} cannot be empty.")
    if not _NAME_RE.match(value):
        raise ValidationError(
            f"Invalid {label.lower()} '{value}': use letters, digits and dashes only."
        )
    return value


def validate_publisher(publisher: str | None) -> str:
    return _validate("Publisher name", publisher)


def validate_extension_name(name: str | None) -> str:
    return _validate("Extension name", name)
