"""Build a ``.vsix`` archive from an extension working directory."""

from __future__ import annotations

import fnmatch
import json
import logging
import mimetypes
import os
import re
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping
from xml.sax.saxutils import escape, quoteattr

from .archive import ARCHIVE_ROOT
from .config import DEFAULT_INSTALLATION_TARGET
from .errors import PackagingError
from .manifest import MANIFEST_FILE_NAME, Manifest, read_manifest

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".vscodeignore"
README_FILE_NAME = "README.md"

_DEFAULT_IGNORE: tuple[str, ...] = (
    ".git/",
    ".vscode-test/",
    "*.vsix",
    IGNORE_FILE_NAME,
)
_MARKDOWN_LINK_RE = re.compile(r"(!?)\[([^\]]*)\]\(([^)\s]+)([^)]*)\)")
_ABSOLUTE_URL_RE = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_GITHUB_RE = re.compile(r"github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?/?$", re.IGNORECASE)


@dataclass(frozen=True)
class PackOptions:
    cwd: Path
    package_path: Path | None = None
    base_content_url: str | None = None
    base_images_url: str | None = None


@dataclass(frozen=True)
class PackageResult:
    manifest: Manifest
    package_path: Path


def pack(options: PackOptions) -> PackageResult:
    """Package ``options.cwd`` into a ``.vsix`` and return the embedded manifest."""

    cwd = Path(options.cwd)
    manifest = read_manifest(cwd, strict=True)
    package_path = (
        Path(options.package_path)
        if options.package_path
        else cwd / f"{manifest.name}-{manifest.version}.vsix"
    )
    content_url, images_url = _base_urls(manifest, options)
    files = collect_files(cwd)

    package_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{package_path.stem}.", suffix=".vsix", dir=str(package_path.parent)
    )
    os.close(fd)
    try:
        with zipfile.ZipFile(tmp_name, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr("extension.vsixmanifest", render_vsixmanifest(manifest, files))
            archive.writestr("[Content_Types].xml", render_content_types(files))
            for rel in files:
                _write_member(archive, cwd, rel, manifest, content_url, images_url)
        os.replace(tmp_name, package_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("packaged %s (%d files) -> %s", manifest.full_name, len(files), package_path)
    return PackageResult(manifest=manifest, package_path=package_path)


def _write_member(
    archive: zipfile.ZipFile,
    cwd: Path,
    rel: str,
    manifest: Manifest,
    content_url: str | None,
    images_url: str | None,
) -> None:
    arcname = f"{ARCHIVE_ROOT}/{rel}"
    if rel == MANIFEST_FILE_NAME:
        body = json.dumps(manifest.to_dict(), ensure_ascii=False, indent=2) + "\n"
        archive.writestr(arcname, body)
        return
    try:
        if rel == README_FILE_NAME:
            text = (cwd / rel).read_text(encoding="utf-8")
            archive.writestr(arcname, rewrite_markdown_links(text, content_url, images_url))
        else:
            archive.write(cwd / rel, arcname)
    except UnicodeDecodeError as exc:
        raise PackagingError(f"{rel} is not valid UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise PackagingError(f"Cannot read {rel}: {exc.strerror or exc}") from exc


def collect_files(cwd: Path) -> list[str]:
    """Return the POSIX-relative paths under ``cwd`` that belong in the archive."""

    patterns = list(_DEFAULT_IGNORE) + _read_ignore_file(cwd / IGNORE_FILE_NAME)
    selected: list[str] = []
    for item in sorted(cwd.rglob("*")):
        if not item.is_file():
            continue
        rel = item.relative_to(cwd).as_posix()
        if not _is_ignored(rel, patterns):
            selected.append(rel)
    if MANIFEST_FILE_NAME not in selected:
        selected.insert(0, MANIFEST_FILE_NAME)
    return selected


def _read_ignore_file(path: Path) -> list[str]:
    if not path.exists():
        return []
    patterns: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            patterns.append(line)
    return patterns


def _is_ignored(rel: str, patterns: Iterable[str]) -> bool:
    ignored = False
    for raw in patterns:
        negated = raw.startswith("!")
        pattern = raw[1:] if negated else raw
        if _matches(rel, pattern):
            ignored = not negated
    return ignored


def _matches(rel: str, pattern: str) -> bool:
    pattern = pattern.lstrip("/")
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    if not pattern:
        return False
    parts = rel.split("/")
    prefixes = ["/".join(parts[: index + 1]) for index in range(len(parts))]
    if directory_only:
        prefixes = prefixes[:-1]
    return any(fnmatch.fnmatchcase(prefix, pattern) for prefix in prefixes)


def _base_urls(manifest: Manifest, options: PackOptions) -> tuple[str | None, str | None]:
    content_url = options.base_content_url
    images_url = options.base_images_url
    repository = _repository_url(manifest.extras.get("repository"))
    match = _GITHUB_RE.search(repository or "")
    if match:
        owner, repo = match.group(1), match.group(2)
        content_url = content_url or f"https://github.com/{owner}/{repo}/blob/HEAD"
        images_url = images_url or f"https://github.com/{owner}/{repo}/raw/HEAD"
    return content_url, images_url or content_url


def _repository_url(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        url = value.get("url")
        return str(url) if url else None
    return None


def _is_relative(url: str) -> bool:
    return not (url.startswith("#") or url.startswith("//") or _ABSOLUTE_URL_RE.match(url))


def _join(base: str, url: str) -> str:
    while url.startswith("./"):
        url = url[2:]
    return f"{base.rstrip('/')}/{url.lstrip('/')}"


def rewrite_markdown_links(text: str, content_url: str | None, images_url: str | None) -> str:
    """Turn relative markdown links and images into absolute URLs."""

    def replace(match: re.Match[str]) -> str:
        bang, label, url, rest = match.groups()
        if not _is_relative(url):
            return match.group(0)
        base = images_url if bang else content_url
        if not base:
            logger.warning("relative link %r left unchanged: no base URL available", url)
            return match.group(0)
        return f"{bang}[{label}]({_join(base, url)}{rest})"

    return _MARKDOWN_LINK_RE.sub(replace, text)


def render_vsixmanifest(manifest: Manifest, files: Iterable[str]) -> str:
    extras = manifest.extras
    display_name = str(extras.get("displayName") or manifest.name)
    description = str(extras.get("description") or "")
    keywords = extras.get("keywords") or []
    tags = ",".join(str(item) for item in keywords) if isinstance(keywords, list) else ""
    assets = [
        f'    <Asset Type="Microsoft.VisualStudio.Code.Manifest" '
        f'Path="{ARCHIVE_ROOT}/{MANIFEST_FILE_NAME}" Addressable="true" />'
    ]
    if README_FILE_NAME in files:
        assets.append(
            f'    <Asset Type="Microsoft.VisualStudio.Services.Content.Details" '
            f'Path="{ARCHIVE_ROOT}/{README_FILE_NAME}" Addressable="true" />'
        )
    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<PackageManifest Version="2.0.0" '
        'xmlns="http://schemas.microsoft.com/developer/vsx-schema/2011" '
        'xmlns:d="http://schemas.microsoft.com/developer/vsx-schema-design/2011">',
        "  <Metadata>",
        f'    <Identity Language="en-US" Id={quoteattr(manifest.name)} '
        f"Version={quoteattr(manifest.version)} Publisher={quoteattr(manifest.publisher)} />",
        f"    <DisplayName>{escape(display_name)}</DisplayName>",
        f'    <Description xml:space="preserve">{escape(description)}</Description>',
        f"    <Tags>{escape(tags)}</Tags>",
        "    <GalleryFlags>Public</GalleryFlags>",
        "  </Metadata>",
        "  <Installation>",
        f'    <InstallationTarget Id="{DEFAULT_INSTALLATION_TARGET}" />',
        "  </Installation>",
        "  <Dependencies />",
        "  <Assets>",
        *assets,
        "  </Assets>",
        "</PackageManifest>",
    ]
    return "\n".join(lines) + "\n"


def render_content_types(files: Iterable[str]) -> str:
    defaults: dict[str, str] = {".vsixmanifest": "text/xml"}
    for rel in files:
        suffix = Path(rel).suffix.lower()
        if not suffix or suffix in defaults:
            continue
        defaults[suffix] = mimetypes.guess_type(rel)[0] or "application/octet-stream"
    entries = "".join(
        f"<Default Extension={quoteattr(suffix)} ContentType={quoteattr(kind)}/>"
        for suffix, kind in sorted(defaults.items())
    )
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        f"{entries}</Types>\n"
    )
