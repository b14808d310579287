"""Tests for reading the embedded manifest out of .vsix archives."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Iterable

import pytest

from vxp_core.archive import extract_manifest
from vxp_core.errors import (
    AmbiguousManifestError,
    ArchiveOpenError,
    ManifestNotFoundError,
    ManifestParseError,
)

MANIFEST = {
    "publisher": "acme",
    "name": "tool",
    "version": "1.0.0",
    "description": "A tool",
    "contributes": {"commands": [{"command": "tool.run", "title": "Run"}]},
}


def _make_archive(path: Path, entries: Iterable[tuple[str, bytes | str]]) -> Path:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries:
            archive.writestr(name, data)
    return path


def test_extract_returns_exact_manifest_content(tmp_path: Path) -> None:
    archive = _make_archive(
        tmp_path / "tool.vsix",
        [
            ("extension.vsixmanifest", "<PackageManifest/>"),
            ("extension/readme.md", "# Tool"),
            ("extension/package.json", json.dumps(MANIFEST)),
            ("extension/out/extension.js", "exports.activate = () => {};"),
        ],
    )
    manifest = extract_manifest(archive)
    assert manifest.to_dict() == MANIFEST
    assert manifest.full_name == "acme.tool@1.0.0"


def test_extract_is_independent_of_entry_order(tmp_path: Path) -> None:
    entries = [
        ("extension/package.json", json.dumps(MANIFEST)),
        ("extension/a.txt", "a"),
        ("[Content_Types].xml", "<Types/>"),
    ]
    first = extract_manifest(_make_archive(tmp_path / "first.vsix", entries))
    second = extract_manifest(_make_archive(tmp_path / "second.vsix", reversed(entries)))
    assert first == second


def test_entry_name_is_matched_case_insensitively(tmp_path: Path) -> None:
    archive = _make_archive(tmp_path / "tool.vsix", [("Extension/Package.JSON", json.dumps(MANIFEST))])
    assert extract_manifest(archive).name == "tool"


def test_manifest_outside_extension_root_is_not_found(tmp_path: Path) -> None:
    archive = _make_archive(
        tmp_path / "tool.vsix",
        [
            ("package.json", json.dumps(MANIFEST)),
            ("extension/node_modules/dep/package.json", "{}"),
            ("other/extension/package.json", "{}"),
        ],
    )
    with pytest.raises(ManifestNotFoundError):
        extract_manifest(archive)


def test_large_manifest_is_read_across_chunks(tmp_path: Path) -> None:
    payload = dict(MANIFEST, description="x" * 300_000)
    archive = _make_archive(tmp_path / "tool.vsix", [("extension/package.json", json.dumps(payload))])
    assert extract_manifest(archive).extras["description"] == "x" * 300_000


def test_multiple_matching_entries_are_rejected(tmp_path: Path) -> None:
    archive = _make_archive(
        tmp_path / "tool.vsix",
        [
            ("extension/package.json", json.dumps(MANIFEST)),
            ("EXTENSION/package.json", json.dumps(MANIFEST)),
        ],
    )
    with pytest.raises(AmbiguousManifestError) as excinfo:
        extract_manifest(archive)
    assert len(excinfo.value.candidates) == 2


def test_malformed_manifest_entry(tmp_path: Path) -> None:
    archive = _make_archive(tmp_path / "tool.vsix", [("extension/package.json", "{oops")])
    with pytest.raises(ManifestParseError):
        extract_manifest(archive)

    archive = _make_archive(tmp_path / "bytes.vsix", [("extension/package.json", b"\xff\xfe\x00")])
    with pytest.raises(ManifestParseError):
        extract_manifest(archive)


def test_missing_or_corrupt_archive_raises_open_error(tmp_path: Path) -> None:
    with pytest.raises(ArchiveOpenError):
        extract_manifest(tmp_path / "missing.vsix")

    corrupt = tmp_path / "corrupt.vsix"
    corrupt.write_bytes(b"this is not a zip file")
    with pytest.raises(ArchiveOpenError):
        extract_manifest(corrupt)


@pytest.mark.parametrize(
    "error",
    [
        RuntimeError("File 'extension/package.json' is encrypted, password required for extraction"),
        NotImplementedError("That compression method is not supported"),
    ],
)
def test_unreadable_manifest_member_raises_open_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, error: Exception
) -> None:
    archive = _make_archive(tmp_path / "tool.vsix", [("extension/package.json", json.dumps(MANIFEST))])

    def _refuse(self, name, mode="r", pwd=None, **kwargs):
        raise error

    monkeypatch.setattr(zipfile.ZipFile, "open", _refuse)
    with pytest.raises(ArchiveOpenError) as excinfo:
        extract_manifest(archive)
    assert excinfo.value.__cause__ is error
