"""Package and publish editor extensions to an extension gallery."""

from .archive import ARCHIVE_MANIFEST_PATH, extract_manifest
from .config import Settings, load_settings
from .events import Event, EventBus
from .manifest import Manifest, read_manifest, write_manifest
from .packager import PackageResult, PackOptions, pack
from .publish import (
    PublishOptions,
    UnpublishOptions,
    list_extensions,
    publish,
    publish_artifact,
    resolve_publish_source,
    resolve_version,
    unpublish,
)
from .store import Publisher, PublisherStore
from .app import VXPApp

__all__ = [
    "ARCHIVE_MANIFEST_PATH",
    "Event",
    "EventBus",
    "Manifest",
    "PackOptions",
    "PackageResult",
    "PublishOptions",
    "Publisher",
    "PublisherStore",
    "Settings",
    "UnpublishOptions",
    "VXPApp",
    "extract_manifest",
    "list_extensions",
    "load_settings",
    "pack",
    "publish",
    "publish_artifact",
    "read_manifest",
    "resolve_publish_source",
    "resolve_version",
    "unpublish",
    "write_manifest",
]
