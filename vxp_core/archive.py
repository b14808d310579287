"""Read the embedded manifest out of a packaged ``.vsix`` archive."""

from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path

from .errors import (
    AmbiguousManifestError,
    ArchiveOpenError,
    ManifestNotFoundError,
)
from .manifest import Manifest, parse_manifest

logger = logging.getLogger(__name__)

ARCHIVE_ROOT = "extension"
ARCHIVE_MANIFEST_PATH = f"{ARCHIVE_ROOT}/package.json"

_CHUNK_SIZE = 64 * 1024


def is_manifest_entry(name: str) -> bool:
    return name.lower() == ARCHIVE_MANIFEST_PATH


def extract_manifest(package_path: Path | str) -> Manifest:
    """Return the manifest stored at ``extension/package.json`` inside the archive.

    Entries are scanned in archive order and matched case-insensitively. The
    matching entry is streamed rather than extracted; the rest of the archive
    is never decompressed.
    """

    path = Path(package_path)
    try:
        archive = zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveOpenError(f"Cannot open archive {path}: {exc}") from exc

    with archive:
        matches = [info for info in archive.infolist() if is_manifest_entry(info.filename)]
        if not matches:
            raise ManifestNotFoundError(f"Manifest not found in {path}")
        if len(matches) > 1:
            raise AmbiguousManifestError(str(path), [info.filename for info in matches])

        entry = matches[0]
        logger.debug("reading %s from %s (%s bytes)", entry.filename, path, entry.file_size)
        buffers: list[bytes] = []
        try:
            with archive.open(entry) as stream:
                for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
                    buffers.append(chunk)
        except (
            OSError,
            RuntimeError,
            NotImplementedError,
            zipfile.BadZipFile,
            zlib.error,
        ) as exc:
            raise ArchiveOpenError(f"Cannot read {entry.filename} from {path}: {exc}") from exc

    return parse_manifest(b"".join(buffers), source=f"{path}:{entry.filename}")
