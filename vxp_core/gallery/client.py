"""HTTP client for the extension gallery REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Sequence, Tuple

import requests
from requests import RequestException, Response

from .errors import GalleryError
from .types import (
    ExtensionQuery,
    ExtensionQueryFlags,
    PublishedExtension,
    extensions_from_query_result,
)

log = logging.getLogger(__name__)

API_VERSION = "3.0-preview.1"

GalleryFactory = Callable[[str], "GalleryClient"]


@dataclass
class GalleryClient:
    """Thin ``requests`` wrapper authenticated with a personal access token."""

    base_url: str
    token: str
    timeout: float | Tuple[float, float] = 30.0
    session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self.session = requests.Session()
        self.session.auth = ("OAuth", self.token)
        self.session.headers["Accept"] = f"application/json;api-version={API_VERSION}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/_apis/gallery{path}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        ok_statuses: Sequence[int] = tuple(range(200, 300)),
        **kwargs: Any,
    ) -> Response:
        url = self._url(path)
        log.debug("gallery %s %s", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except RequestException as exc:
            raise GalleryError(f"{method} {url} failed: {exc}") from exc

        if resp.status_code not in ok_statuses:
            raise GalleryError(_error_message(resp), status_code=resp.status_code)
        return resp

    def get_extension(
        self,
        publisher: str,
        name: str,
        flags: ExtensionQueryFlags = ExtensionQueryFlags.INCLUDE_VERSIONS,
    ) -> PublishedExtension:
        resp = self._request(
            "GET",
            f"/publishers/{publisher}/extensions/{name}",
            params={"flags": int(flags)},
        )
        return PublishedExtension.from_dict(resp.json())

    def create_extension(self, stream: BinaryIO) -> PublishedExtension:
        resp = self._request(
            "POST",
            "/extensions",
            data=stream,
            headers={"Content-Type": "application/octet-stream"},
        )
        return PublishedExtension.from_dict(_json_or_empty(resp))

    def update_extension(self, stream: BinaryIO, publisher: str, name: str) -> PublishedExtension:
        resp = self._request(
            "PUT",
            f"/publishers/{publisher}/extensions/{name}",
            data=stream,
            headers={"Content-Type": "application/octet-stream"},
        )
        return PublishedExtension.from_dict(_json_or_empty(resp))

    def delete_extension(self, publisher: str, name: str) -> None:
        self._request("DELETE", f"/publishers/{publisher}/extensions/{name}")

    def query_extensions(self, query: ExtensionQuery) -> list[PublishedExtension]:
        resp = self._request("POST", "/extensionquery", json=query.to_dict())
        return extensions_from_query_result(resp.json())


def _json_or_empty(resp: Response) -> dict[str, Any]:
    if not resp.content:
        return {}
    try:
        payload = resp.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _error_message(resp: Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    detail = (resp.text or "").strip()
    return detail or f"gallery returned {resp.status_code}"


def gallery_factory(base_url: str, *, timeout: float = 30.0) -> GalleryFactory:
    """Return a callable that builds a client for a given token."""

    def build(token: str) -> GalleryClient:
        return GalleryClient(base_url=base_url, token=token, timeout=timeout)

    return build
