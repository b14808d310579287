"""Tests for the publisher credential store."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from vxp_core.errors import UnknownPublisherError, ValidationError, VxpError
from vxp_core.store import Publisher, PublisherStore


def test_missing_store_is_empty(tmp_path: Path) -> None:
    store = PublisherStore(tmp_path / "nested" / "publishers.json")
    assert store.list_publishers() == []
    assert store.find_publisher("acme") is None


def test_add_persists_sorted_and_private(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "publishers.json"
    store = PublisherStore(path)
    store.add_publisher("zeta", "pat-z")
    store.add_publisher("acme", "pat-a")

    assert [p.name for p in store.list_publishers()] == ["acme", "zeta"]
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert {"name": "zeta", "pat": "pat-z"} in payload["publishers"]
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert not [item for item in path.parent.iterdir() if item.name.startswith(".publishers.")]


def test_add_replaces_existing_token(tmp_path: Path) -> None:
    store = PublisherStore(tmp_path / "publishers.json")
    store.add_publisher("acme", "old")
    store.add_publisher("acme", "new")
    assert store.list_publishers() == [Publisher("acme", "new")]
    assert store.get_publisher("acme").pat == "new"


def test_add_rejects_bad_input(tmp_path: Path) -> None:
    store = PublisherStore(tmp_path / "publishers.json")
    with pytest.raises(ValidationError):
        store.add_publisher("Not Valid!", "pat")
    with pytest.raises(VxpError):
        store.add_publisher("acme", "")
    assert not store.path.exists()


def test_get_unknown_publisher(tmp_path: Path) -> None:
    store = PublisherStore(tmp_path / "publishers.json")
    with pytest.raises(UnknownPublisherError) as excinfo:
        store.get_publisher("acme")
    assert excinfo.value.publisher == "acme"
    assert "vxp login acme" in str(excinfo.value)


def test_delete_publisher(tmp_path: Path) -> None:
    store = PublisherStore(tmp_path / "publishers.json")
    store.add_publisher("acme", "pat")
    store.add_publisher("other", "pat")
    store.delete_publisher("acme")
    assert [p.name for p in store.list_publishers()] == ["other"]
    with pytest.raises(UnknownPublisherError):
        store.delete_publisher("acme")


def test_corrupt_store_is_reported(tmp_path: Path) -> None:
    path = tmp_path / "publishers.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(VxpError, match="Cannot read publisher store"):
        PublisherStore(path).list_publishers()


def test_incomplete_entries_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "publishers.json"
    path.write_text(
        json.dumps({"publishers": [{"name": "acme"}, {"name": "ok", "pat": "x"}, "junk"]}),
        encoding="utf-8",
    )
    assert PublisherStore(path).list_publishers() == [Publisher("ok", "x")]
