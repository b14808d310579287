"""Typed errors raised by the packaging and publishing pipeline."""

from __future__ import annotations


class VxpError(RuntimeError):
    """Base error for every failure surfaced by vxp."""


class ConfigurationError(VxpError):
    """Options were combined in a way that is not supported."""


class ValidationError(VxpError):
    """A publisher or extension identifier is malformed."""


class InvalidVersionError(VxpError):
    """A version directive is neither a bump keyword nor a valid version."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Invalid version {version}")
        self.version = version


class ManifestError(VxpError):
    """The working-directory manifest is missing or incomplete."""


class ManifestParseError(ManifestError):
    """Manifest content is not a valid JSON object."""


class ArchiveError(VxpError):
    """Base error for archive inspection failures."""


class ArchiveOpenError(ArchiveError):
    """The archive cannot be opened or one of its members cannot be read."""


class ManifestNotFoundError(ArchiveError):
    """The archive holds no ``extension/package.json`` entry."""


class AmbiguousManifestError(ArchiveError):
    """The archive holds more than one ``extension/package.json`` entry."""

    def __init__(self, path: str, candidates: list[str]) -> None:
        super().__init__(f"{path} contains multiple manifests: {', '.join(candidates)}")
        self.candidates = tuple(candidates)


class ProposedApiForbiddenError(VxpError):
    """Extensions declaring ``enableProposedApi`` cannot be published."""


class DuplicateVersionError(VxpError):
    """The gallery already holds this exact version."""

    def __init__(self, full_name: str) -> None:
        super().__init__(f"{full_name} already exists. Version number cannot be the same.")
        self.full_name = full_name


class AlreadyExistsConflictError(VxpError):
    """The gallery rejected the upload with a conflict."""

    def __init__(self, full_name: str) -> None:
        super().__init__(f"{full_name} already exists.")
        self.full_name = full_name


class UserAbortedError(VxpError):
    """The user declined an interactive confirmation."""

    def __init__(self, message: str = "Aborted") -> None:
        super().__init__(message)


class UnknownPublisherError(VxpError):
    """No credentials are stored for the requested publisher."""

    def __init__(self, publisher: str) -> None:
        super().__init__(
            f"Unknown publisher '{publisher}'. Run `vxp login {publisher}` first."
        )
        self.publisher = publisher


class PackagingError(VxpError):
    """A file selected for the archive could not be read or encoded."""


class UnknownCommandError(VxpError):
    """No command is registered under the requested name."""


class CommandCollisionError(VxpError):
    """Two commands were registered under the same name."""
