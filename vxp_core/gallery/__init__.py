"""Gallery client package for vxp."""

from .client import API_VERSION, GalleryClient, GalleryFactory, gallery_factory
from .errors import GalleryError
from .types import (
    ExtensionQuery,
    ExtensionQueryFilterType,
    ExtensionQueryFlags,
    ExtensionVersion,
    FilterCriteria,
    PagingDirection,
    PublishedExtension,
    QueryFilter,
    SortByType,
    SortOrderType,
)

__all__ = [
    "API_VERSION",
    "GalleryClient",
    "GalleryFactory",
    "gallery_factory",
    "GalleryError",
    "ExtensionQuery",
    "ExtensionQueryFilterType",
    "ExtensionQueryFlags",
    "ExtensionVersion",
    "FilterCriteria",
    "PagingDirection",
    "PublishedExtension",
    "QueryFilter",
    "SortByType",
    "SortOrderType",
]
