"""Publish pipeline: version bumps, package resolution and gallery transactions."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import semver
from .archive import extract_manifest
from .config import DEFAULT_INSTALLATION_TARGET
from .errors import (
    AlreadyExistsConflictError,
    ConfigurationError,
    DuplicateVersionError,
    InvalidVersionError,
    ProposedApiForbiddenError,
    UserAbortedError,
)
from .events import EventBus
from .gallery import (
    ExtensionQuery,
    ExtensionQueryFilterType,
    ExtensionQueryFlags,
    FilterCriteria,
    GalleryError,
    GalleryFactory,
    PagingDirection,
    PublishedExtension,
    QueryFilter,
    SortByType,
    SortOrderType,
)
from .manifest import Manifest, read_manifest, write_manifest
from .packager import PackageResult, PackOptions, pack
from .prompt import Reader, read
from .store import PublisherStore
from .validation import validate_publisher

logger = logging.getLogger(__name__)

Packer = Callable[[PackOptions], PackageResult]
Extractor = Callable[[Path], Manifest]

PAT_HINT = (
    "\n\nYou're likely using an expired Personal Access Token, please get a new PAT."
    "\nMore info: https://aka.ms/vscodepat"
)
_INVALID_RESOURCE_RE = re.compile(r"Invalid Resource")
_CONFIRM_RE = re.compile(r"^y$", re.IGNORECASE)


@dataclass(frozen=True)
class PublishOptions:
    cwd: Path
    package_path: Path | None = None
    version: str | None = None
    pat: str | None = None
    base_content_url: str | None = None
    base_images_url: str | None = None


@dataclass(frozen=True)
class UnpublishOptions:
    cwd: Path
    id: str | None = None
    pat: str | None = None


def resolve_version(current_version: str, directive: str) -> str:
    """Apply a bump keyword or validate an explicit version."""

    if directive in semver.RELEASE_TYPES:
        bumped = semver.inc(current_version, directive)
        if bumped is None:
            raise InvalidVersionError(current_version)
        return bumped

    explicit = semver.valid(directive)
    if explicit is None:
        raise InvalidVersionError(directive)
    return explicit


def bump_manifest_version(cwd: Path, directive: str | None) -> str | None:
    """Rewrite ``package.json`` in ``cwd`` with the resolved version.

    Returns the version now on disk, or ``None`` when no directive was given.
    The file is only touched when the version actually changes.
    """

    if not directive:
        return None
    manifest = read_manifest(cwd, strict=False)
    version = resolve_version(manifest.version, directive)
    if version != manifest.version:
        logger.info("bumping %s.%s %s -> %s", manifest.publisher, manifest.name, manifest.version, version)
        manifest.version = version
        write_manifest(cwd, manifest)
    return version


def _temp_package_path() -> Path:
    fd, name = tempfile.mkstemp(prefix="vxp-", suffix=".vsix")
    os.close(fd)
    return Path(name)


def resolve_publish_source(
    options: PublishOptions,
    *,
    packer: Packer = pack,
    extractor: Extractor = extract_manifest,
    temp_path: Callable[[], Path] = _temp_package_path,
) -> PackageResult:
    """Return the manifest and archive a publish should upload."""

    if options.package_path:
        if options.version:
            raise ConfigurationError("Not supported: packagePath and version.")
        package_path = Path(options.package_path)
        return PackageResult(manifest=extractor(package_path), package_path=package_path)

    bump_manifest_version(options.cwd, options.version)
    return packer(
        PackOptions(
            cwd=options.cwd,
            package_path=temp_path(),
            base_content_url=options.base_content_url,
            base_images_url=options.base_images_url,
        )
    )


def _ensure_publishable(manifest: Manifest) -> None:
    if manifest.enable_proposed_api:
        raise ProposedApiForbiddenError(
            "Extensions using proposed API (enableProposedApi: true) "
            "can't be published to the Marketplace"
        )


def _warn_if_older(manifest: Manifest, existing: PublishedExtension) -> None:
    latest = existing.latest_version
    if not latest or semver.valid(latest) is None or semver.valid(manifest.version) is None:
        return
    if semver.compare(manifest.version, latest) < 0:
        logger.warning(
            "%s is older than the latest published version %s", manifest.full_name, latest
        )


def _append_credential_hint(exc: BaseException) -> None:
    message = str(exc)
    if _INVALID_RESOURCE_RE.search(message):
        exc.args = (message + PAT_HINT, *exc.args[1:])


def publish_artifact(
    package_path: Path,
    token: str,
    manifest: Manifest,
    *,
    gallery_factory: GalleryFactory,
    events: EventBus | None = None,
) -> None:
    """Upload ``package_path`` as a new extension or a new version of an existing one."""

    _ensure_publishable(manifest)
    full_name = manifest.full_name
    logger.info("Publishing %s...", full_name)
    api = gallery_factory(token)

    try:
        try:
            existing: PublishedExtension | None = api.get_extension(
                manifest.publisher,
                manifest.name,
                ExtensionQueryFlags.INCLUDE_VERSIONS,
            )
        except GalleryError as exc:
            if not exc.not_found:
                raise
            existing = None

        if existing is not None and existing.has_version(manifest.version):
            raise DuplicateVersionError(full_name)
        if existing is not None:
            _warn_if_older(manifest, existing)

        try:
            with Path(package_path).open("rb") as stream:
                if existing is None:
                    api.create_extension(stream)
                else:
                    api.update_extension(stream, manifest.publisher, manifest.name)
        except GalleryError as exc:
            if exc.conflict:
                raise AlreadyExistsConflictError(full_name) from exc
            raise
    except Exception as exc:
        _append_credential_hint(exc)
        raise

    logger.info("Successfully published %s!", full_name)
    if events is not None:
        events.emit(
            "published",
            {"id": manifest.id, "version": manifest.version, "package_path": str(package_path)},
        )


def publish(
    options: PublishOptions,
    *,
    store: PublisherStore,
    gallery_factory: GalleryFactory,
    events: EventBus | None = None,
    packer: Packer = pack,
    extractor: Extractor = extract_manifest,
) -> None:
    result = resolve_publish_source(options, packer=packer, extractor=extractor)
    _ensure_publishable(result.manifest)
    pat = options.pat or store.get_publisher(result.manifest.publisher).pat
    publish_artifact(
        result.package_path,
        pat,
        result.manifest,
        gallery_factory=gallery_factory,
        events=events,
    )


def build_listing_query(installation_target: str = DEFAULT_INSTALLATION_TARGET) -> ExtensionQuery:
    criteria = FilterCriteria(ExtensionQueryFilterType.INSTALLATION_TARGET, installation_target)
    return ExtensionQuery(
        filters=(
            QueryFilter(
                criteria=(criteria,),
                direction=PagingDirection.FORWARD,
                page_number=0,
                page_size=1000,
                sort_by=SortByType.RELEVANCE,
                sort_order=SortOrderType.DEFAULT,
            ),
        ),
        flags=ExtensionQueryFlags.INCLUDE_LATEST_VERSION_ONLY
        | ExtensionQueryFlags.INCLUDE_VERSION_PROPERTIES,
    )


def list_extensions(
    publisher: str,
    *,
    store: PublisherStore,
    gallery_factory: GalleryFactory,
    installation_target: str = DEFAULT_INSTALLATION_TARGET,
    events: EventBus | None = None,
) -> list[PublishedExtension]:
    """Return the latest version of every extension owned by ``publisher``."""

    validate_publisher(publisher)
    api = gallery_factory(store.get_publisher(publisher).pat)
    results = api.query_extensions(build_listing_query(installation_target))
    owned = [item for item in results if item.publisher == publisher]
    for item in owned:
        line = f"{item.name} @ {item.latest_version}"
        logger.debug("listed %s.%s", publisher, line)
        if events is not None:
            events.emit("listed", {"publisher": publisher, "name": item.name, "line": line})
    return owned


def _resolve_identity(options: UnpublishOptions) -> tuple[str, str]:
    if options.id:
        publisher, sep, name = options.id.partition(".")
        if not sep or not publisher or not name:
            raise ConfigurationError(
                f"Invalid extension id '{options.id}': expected publisher.name"
            )
        return publisher, name
    manifest = read_manifest(options.cwd)
    return manifest.publisher, manifest.name


def unpublish(
    options: UnpublishOptions,
    *,
    store: PublisherStore,
    gallery_factory: GalleryFactory,
    reader: Reader = read,
    events: EventBus | None = None,
) -> None:
    """Delete an extension from the gallery after an explicit ``y`` confirmation."""

    publisher, name = _resolve_identity(options)
    full_name = f"{publisher}.{name}"
    answer = reader(f"This will FOREVER delete '{full_name}'! Are you sure? [y/N] ")
    if not _CONFIRM_RE.match((answer or "").strip()):
        raise UserAbortedError()

    pat = options.pat or store.get_publisher(publisher).pat
    gallery_factory(pat).delete_extension(publisher, name)
    logger.info("Successfully deleted %s!", full_name)
    if events is not None:
        events.emit("unpublished", {"id": full_name})
