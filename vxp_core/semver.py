"""Semantic version parsing, validation, ordering and increments."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

__all__ = [
    "RELEASE_TYPES",
    "SemVer",
    "compare",
    "inc",
    "parse",
    "valid",
]

RELEASE_TYPES: Tuple[str, ...] = ("major", "minor", "patch")

_NUMERIC = r"0|[1-9]\d*"
_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_SEMVER_RE = re.compile(
    rf"^[v=]?\s*({_NUMERIC})\.({_NUMERIC})\.({_NUMERIC})"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        return text

    def bump(self, release: str) -> "SemVer":
        """Return the next version for ``release`` (``major``, ``minor`` or ``patch``).

        A prerelease is promoted to its own release when the components below
        ``release`` are already zero, so ``1.2.0-beta`` bumped by ``minor``
        yields ``1.2.0`` rather than ``1.3.0``.
        """

        base = replace(self, prerelease=(), build=())
        if release == "major":
            if self.minor == 0 and self.patch == 0 and self.prerelease:
                return base
            return SemVer(self.major + 1, 0, 0)
        if release == "minor":
            if self.patch == 0 and self.prerelease:
                return base
            return SemVer(self.major, self.minor + 1, 0)
        if release == "patch":
            if self.prerelease:
                return base
            return SemVer(self.major, self.minor, self.patch + 1)
        raise ValueError(f"unknown release type: {release!r}")


def parse(version: Optional[str]) -> Optional[SemVer]:
    """Parse ``version`` leniently (surrounding whitespace, leading ``v``/``=``)."""

    if version is None:
        return None
    match = _SEMVER_RE.match(str(version).strip())
    if not match:
        return None
    major, minor, patch, pre, build = match.groups()
    return SemVer(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(pre.split(".")) if pre else (),
        build=tuple(build.split(".")) if build else (),
    )


def valid(version: Optional[str]) -> Optional[str]:
    """Return the canonical form of ``version`` or ``None`` when it is invalid."""

    parsed = parse(version)
    return str(parsed) if parsed is not None else None


def inc(version: str, release: str) -> Optional[str]:
    parsed = parse(version)
    if parsed is None or release not in RELEASE_TYPES:
        return None
    return str(parsed.bump(release))


def _compare_identifiers(a: str, b: str) -> int:
    a_num, b_num = a.isdigit(), b.isdigit()
    if a_num and b_num:
        left, right = int(a), int(b)
        return (left > right) - (left < right)
    if a_num:
        return -1
    if b_num:
        return 1
    return (a > b) - (a < b)


def _compare_prerelease(a: Tuple[str, ...], b: Tuple[str, ...]) -> int:
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1
    for left, right in zip(a, b):
        result = _compare_identifiers(left, right)
        if result:
            return result
    return (len(a) > len(b)) - (len(a) < len(b))


def compare(a: str, b: str) -> int:
    """Compare two versions by semver precedence, ignoring build metadata."""

    left, right = parse(a), parse(b)
    if left is None:
        raise ValueError(f"invalid version: {a!r}")
    if right is None:
        raise ValueError(f"invalid version: {b!r}")
    core_left = (left.major, left.minor, left.patch)
    core_right = (right.major, right.minor, right.patch)
    if core_left != core_right:
        return 1 if core_left > core_right else -1
    return _compare_prerelease(left.prerelease, right.prerelease)
