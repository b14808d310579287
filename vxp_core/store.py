"""Persisted publisher credentials (name + personal access token)."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import UnknownPublisherError, VxpError
from .validation import validate_publisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Publisher:
    name: str
    pat: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "pat": self.pat}


class PublisherStore:
    """JSON-backed store of ``{"publishers": [{"name", "pat"}]}``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> list[Publisher]:
        if not self.path.exists():
            return []
        try:
            payload: Any = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise VxpError(f"Cannot read publisher store {self.path}: {exc}") from exc
        entries = payload.get("publishers") if isinstance(payload, dict) else None
        publishers: list[Publisher] = []
        for entry in entries or []:
            if isinstance(entry, dict) and entry.get("name") and entry.get("pat"):
                publishers.append(Publisher(name=str(entry["name"]), pat=str(entry["pat"])))
        return publishers

    def _save(self, publishers: list[Publisher]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        body = json.dumps({"publishers": [p.to_dict() for p in publishers]}, indent=2)
        fd, tmp_name = tempfile.mkstemp(prefix=".publishers.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def list_publishers(self) -> list[Publisher]:
        return sorted(self._load(), key=lambda item: item.name)

    def find_publisher(self, name: str) -> Publisher | None:
        validate_publisher(name)
        for publisher in self._load():
            if publisher.name == name:
                return publisher
        return None

    def get_publisher(self, name: str) -> Publisher:
        publisher = self.find_publisher(name)
        if publisher is None:
            raise UnknownPublisherError(name)
        return publisher

    def add_publisher(self, name: str, pat: str) -> Publisher:
        validate_publisher(name)
        if not pat:
            raise VxpError("Personal access token cannot be empty.")
        publisher = Publisher(name=name, pat=pat)
        publishers = [item for item in self._load() if item.name != name]
        publishers.append(publisher)
        self._save(publishers)
        logger.info("stored credentials for publisher %s in %s", name, self.path)
        return publisher

    def delete_publisher(self, name: str) -> None:
        publishers = self._load()
        remaining = [item for item in publishers if item.name != name]
        if len(remaining) == len(publishers):
            raise UnknownPublisherError(name)
        self._save(remaining)
        logger.info("removed publisher %s from %s", name, self.path)
