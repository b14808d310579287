"""Gallery query enums and the read-only views of published extensions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Any, Mapping, Sequence, Tuple


class ExtensionQueryFlags(IntFlag):
    NONE = 0
    INCLUDE_VERSIONS = 0x1
    INCLUDE_FILES = 0x2
    INCLUDE_CATEGORY_AND_TAGS = 0x4
    INCLUDE_SHARED_ACCOUNTS = 0x8
    INCLUDE_VERSION_PROPERTIES = 0x10
    EXCLUDE_NON_VALIDATED = 0x20
    INCLUDE_INSTALLATION_TARGETS = 0x40
    INCLUDE_ASSET_URI = 0x80
    INCLUDE_STATISTICS = 0x100
    INCLUDE_LATEST_VERSION_ONLY = 0x200


class ExtensionQueryFilterType(IntEnum):
    TAG = 1
    DISPLAY_NAME = 2
    PRIVATE = 3
    ID = 4
    CATEGORY = 5
    CONTRIBUTION_TYPE = 6
    NAME = 7
    INSTALLATION_TARGET = 8
    FEATURED = 9
    SEARCH_TEXT = 10


class PagingDirection(IntEnum):
    BACKWARD = 1
    FORWARD = 2


class SortByType(IntEnum):
    RELEVANCE = 0
    LAST_UPDATED_DATE = 1
    TITLE = 2
    PUBLISHER = 3
    INSTALL_COUNT = 4


class SortOrderType(IntEnum):
    DEFAULT = 0
    ASCENDING = 1
    DESCENDING = 2


@dataclass(frozen=True)
class ExtensionVersion:
    version: str
    last_updated: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExtensionVersion":
        last_updated = data.get("lastUpdated")
        return cls(
            version=str(data.get("version", "")),
            last_updated=str(last_updated) if last_updated else None,
        )


@dataclass(frozen=True)
class PublishedExtension:
    publisher: str
    name: str
    display_name: str | None = None
    versions: Tuple[ExtensionVersion, ...] = ()

    @property
    def latest_version(self) -> str | None:
        return self.versions[0].version if self.versions else None

    def has_version(self, version: str) -> bool:
        return any(item.version == version for item in self.versions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PublishedExtension":
        publisher = data.get("publisher")
        publisher_name = (
            publisher.get("publisherName") if isinstance(publisher, Mapping) else publisher
        )
        raw_versions = data.get("versions") or []
        return cls(
            publisher=str(publisher_name or ""),
            name=str(data.get("extensionName", "")),
            display_name=data.get("displayName"),
            versions=tuple(
                ExtensionVersion.from_dict(item)
                for item in raw_versions
                if isinstance(item, Mapping)
            ),
        )


@dataclass(frozen=True)
class FilterCriteria:
    filter_type: ExtensionQueryFilterType
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"filterType": int(self.filter_type), "value": self.value}


@dataclass(frozen=True)
class QueryFilter:
    criteria: Tuple[FilterCriteria, ...]
    direction: PagingDirection = PagingDirection.FORWARD
    page_number: int = 0
    page_size: int = 1000
    paging_token: str | None = None
    sort_by: SortByType = SortByType.RELEVANCE
    sort_order: SortOrderType = SortOrderType.DEFAULT

    def to_dict(self) -> dict[str, Any]:
        return {
            "criteria": [item.to_dict() for item in self.criteria],
            "direction": int(self.direction),
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "pagingToken": self.paging_token,
            "sortBy": int(self.sort_by),
            "sortOrder": int(self.sort_order),
        }


@dataclass(frozen=True)
class ExtensionQuery:
    filters: Tuple[QueryFilter, ...]
    flags: ExtensionQueryFlags = ExtensionQueryFlags.NONE
    asset_types: Sequence[str] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filters": [item.to_dict() for item in self.filters],
            "flags": int(self.flags),
            "assetTypes": list(self.asset_types),
        }


def extensions_from_query_result(payload: Mapping[str, Any]) -> list[PublishedExtension]:
    """Flatten ``{"results": [{"extensions": [...]}]}`` into extension views."""

    extensions: list[PublishedExtension] = []
    for result in payload.get("results") or []:
        if not isinstance(result, Mapping):
            continue
        for item in result.get("extensions") or []:
            if isinstance(item, Mapping):
                extensions.append(PublishedExtension.from_dict(item))
    return extensions
