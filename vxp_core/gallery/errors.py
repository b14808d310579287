"""Errors raised by the gallery HTTP client."""

from __future__ import annotations

from ..errors import VxpError


class GalleryError(VxpError):
    """A gallery request failed; ``status_code`` is ``None`` for transport errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404

    @property
    def conflict(self) -> bool:
        return self.status_code == 409
