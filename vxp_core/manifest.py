"""Extension manifest model and working-directory ``package.json`` I/O."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from . import semver
from .errors import ManifestError, ManifestParseError, ValidationError
from .validation import validate_extension_name, validate_publisher

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "package.json"

_KNOWN_KEYS = ("publisher", "name", "version", "enableProposedApi")


@dataclass
class Manifest:
    """Identity and metadata of an extension.

    Only ``publisher``, ``name``, ``version`` and ``enableProposedApi`` are
    interpreted; every other key is kept in ``extras`` and written back
    untouched, in its original position.
    """

    publisher: str
    name: str
    version: str
    enable_proposed_api: bool = False
    extras: Dict[str, Any] = field(default_factory=dict)
    key_order: Tuple[str, ...] = field(default=(), repr=False, compare=False)

    @property
    def id(self) -> str:
        return f"{self.publisher}.{self.name}"

    @property
    def full_name(self) -> str:
        return f"{self.publisher}.{self.name}@{self.version}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Manifest":
        extras = {key: value for key, value in data.items() if key not in _KNOWN_KEYS}
        return cls(
            publisher=str(data.get("publisher") or ""),
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            enable_proposed_api=bool(data.get("enableProposedApi", False)),
            extras=extras,
            key_order=tuple(str(key) for key in data.keys()),
        )

    def to_dict(self) -> Dict[str, Any]:
        values: Dict[str, Any] = dict(self.extras)
        values["publisher"] = self.publisher
        values["name"] = self.name
        values["version"] = self.version
        if self.enable_proposed_api or "enableProposedApi" in self.key_order:
            values["enableProposedApi"] = self.enable_proposed_api

        ordered: Dict[str, Any] = {}
        for key in self.key_order:
            if key in values:
                ordered[key] = values.pop(key)
        ordered.update(values)
        return ordered

    def validate(self) -> None:
        """Strict checks applied before packaging."""

        for key in ("publisher", "name", "version"):
            if not getattr(self, key):
                raise ManifestError(f"Manifest missing field: {key}")
        try:
            validate_publisher(self.publisher)
            validate_extension_name(self.name)
        except ValidationError as exc:
            raise ManifestError(str(exc)) from exc
        if semver.valid(self.version) is None:
            raise ManifestError(f"Invalid extension version '{self.version}'")
        engines = self.extras.get("engines")
        if not isinstance(engines, Mapping) or not engines.get("vscode"):
            raise ManifestError("Manifest missing field: engines.vscode")


def parse_manifest(raw: bytes | str, *, source: str = MANIFEST_FILE_NAME) -> Manifest:
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        payload = json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestParseError(f"Error parsing {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ManifestParseError(f"Error parsing {source}: expected a JSON object")
    return Manifest.from_dict(payload)


def manifest_path(cwd: Path | str) -> Path:
    return Path(cwd) / MANIFEST_FILE_NAME


def read_manifest(cwd: Path | str, strict: bool = False) -> Manifest:
    """Read ``package.json`` from ``cwd``; ``strict`` enforces publishable fields."""

    path = manifest_path(cwd)
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest at {path}: {exc.strerror or exc}") from exc
    manifest = parse_manifest(raw, source=str(path))
    if strict:
        manifest.validate()
    return manifest


def write_manifest(cwd: Path | str, manifest: Manifest) -> Path:
    """Replace ``package.json`` atomically so a crash keeps the previous file."""

    path = manifest_path(cwd)
    body = json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2) + "\n"
    fd, tmp_name = tempfile.mkstemp(prefix=".package.", suffix=".json", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(body)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("wrote manifest %s version=%s", path, manifest.version)
    return path
