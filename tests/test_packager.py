"""Tests for building .vsix archives from an extension directory."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

from vxp_core.archive import extract_manifest
from vxp_core.errors import ManifestError, PackagingError
from vxp_core.packager import PackOptions, collect_files, pack, rewrite_markdown_links


def _create_extension_dir(root: Path, **overrides: object) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    manifest: dict = {
        "name": "tool",
        "displayName": "Tool & Friends",
        "description": "Does <things>",
        "publisher": "acme",
        "version": "1.2.3",
        "engines": {"vscode": "^1.80.0"},
        "keywords": ["lint", "format"],
    }
    manifest.update(overrides)
    (root / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    (root / "README.md").write_text(
        "# Tool\n\n![logo](images/logo.png)\nSee [docs](./docs/usage.md) or [site](https://acme.dev).\n",
        encoding="utf-8",
    )
    (root / "out").mkdir(exist_ok=True)
    (root / "out" / "extension.js").write_text("exports.activate = () => {};\n", encoding="utf-8")
    (root / "src").mkdir(exist_ok=True)
    (root / "src" / "extension.ts").write_text("export function activate() {}\n", encoding="utf-8")
    (root / "src" / "keep.ts").write_text("// kept\n", encoding="utf-8")
    (root / ".git").mkdir(exist_ok=True)
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (root / "old-0.0.1.vsix").write_bytes(b"PK")
    (root / ".vscodeignore").write_text("# sources\nsrc/**\n!src/keep.ts\n", encoding="utf-8")
    return root


def test_collect_files_honours_ignore_rules(tmp_path: Path) -> None:
    root = _create_extension_dir(tmp_path / "ext")
    assert collect_files(root) == [
        "README.md",
        "out/extension.js",
        "package.json",
        "src/keep.ts",
    ]


def test_pack_writes_archive_with_embedded_manifest(tmp_path: Path) -> None:
    root = _create_extension_dir(tmp_path / "ext")
    result = pack(PackOptions(cwd=root))

    assert result.package_path == root / "tool-1.2.3.vsix"
    assert result.manifest.full_name == "acme.tool@1.2.3"
    with zipfile.ZipFile(result.package_path) as archive:
        names = set(archive.namelist())
        vsixmanifest = archive.read("extension.vsixmanifest").decode("utf-8")
    assert {
        "extension.vsixmanifest",
        "[Content_Types].xml",
        "extension/package.json",
        "extension/README.md",
        "extension/out/extension.js",
        "extension/src/keep.ts",
    } == names
    assert 'Id="tool"' in vsixmanifest
    assert 'Publisher="acme"' in vsixmanifest
    assert "Tool &amp; Friends" in vsixmanifest
    assert "<Tags>lint,format</Tags>" in vsixmanifest
    assert extract_manifest(result.package_path) == result.manifest


def test_pack_rewrites_readme_links_with_base_urls(tmp_path: Path) -> None:
    root = _create_extension_dir(tmp_path / "ext")
    out = tmp_path / "dist" / "tool.vsix"
    pack(
        PackOptions(
            cwd=root,
            package_path=out,
            base_content_url="https://example.com/content/",
            base_images_url="https://example.com/images",
        )
    )
    with zipfile.ZipFile(out) as archive:
        readme = archive.read("extension/README.md").decode("utf-8")
    assert "![logo](https://example.com/images/images/logo.png)" in readme
    assert "[docs](https://example.com/content/docs/usage.md)" in readme
    assert "[site](https://acme.dev)" in readme


def test_github_repository_provides_default_base_urls(tmp_path: Path) -> None:
    root = _create_extension_dir(
        tmp_path / "ext",
        repository={"type": "git", "url": "https://github.com/acme/tool.git"},
    )
    result = pack(PackOptions(cwd=root, package_path=tmp_path / "tool.vsix"))
    with zipfile.ZipFile(result.package_path) as archive:
        readme = archive.read("extension/README.md").decode("utf-8")
    assert "![logo](https://github.com/acme/tool/raw/HEAD/images/logo.png)" in readme
    assert "[docs](https://github.com/acme/tool/blob/HEAD/docs/usage.md)" in readme


def test_relative_links_without_base_are_left_alone() -> None:
    text = "[a](docs/a.md) [b](#anchor) ![c](mailto:x@y.z)"
    assert rewrite_markdown_links(text, None, None) == text


def test_pack_requires_publishable_manifest(tmp_path: Path) -> None:
    root = _create_extension_dir(tmp_path / "ext", engines={})
    with pytest.raises(ManifestError):
        pack(PackOptions(cwd=root))


def test_undecodable_readme_fails_without_leaving_an_archive(tmp_path: Path) -> None:
    root = _create_extension_dir(tmp_path / "ext")
    (root / "README.md").write_bytes(b"caf\xe9 au lait\n")
    target = tmp_path / "dist" / "tool.vsix"

    with pytest.raises(PackagingError) as excinfo:
        pack(PackOptions(cwd=root, package_path=target))

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
    assert list((tmp_path / "dist").iterdir()) == []


def test_failed_pack_keeps_the_previous_archive(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _create_extension_dir(tmp_path / "ext")
    target = tmp_path / "tool.vsix"
    target.write_bytes(b"previous build")

    def _unreadable(self, filename, arcname=None, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(filename))

    monkeypatch.setattr(zipfile.ZipFile, "write", _unreadable)
    (root / "extension.js").write_text("exports.activate = () => {};\n", encoding="utf-8")

    with pytest.raises(PackagingError, match="Cannot read extension.js: Permission denied"):
        pack(PackOptions(cwd=root, package_path=target))

    assert target.read_bytes() == b"previous build"
    assert sorted(item.name for item in tmp_path.iterdir()) == ["ext", "tool.vsix"]
