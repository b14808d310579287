"""Application object that wires settings, collaborators and commands together."""

from __future__ import annotations

import logging
from pathlib import Path

from vxp_core.builtins import register_builtin_commands
from vxp_core.config import STORE_FILE_NAME, Settings, load_settings
from vxp_core.events import EventBus
from vxp_core.features import FeatureRegistry
from vxp_core.gallery import GalleryFactory, gallery_factory
from vxp_core.paths import UserDirs
from vxp_core.prompt import Reader, read, read_secret
from vxp_core.store import PublisherStore


class VXPApp:
    """Entry point that glues settings, the publisher store, the gallery and commands.

    Every collaborator can be injected; tests replace the gallery factory and
    the prompt readers, the CLI builds everything from :func:`load_settings`.
    """

    def __init__(
        self,
        *,
        cwd: Path | str,
        settings: Settings | None = None,
        user_dirs: UserDirs | None = None,
        events: EventBus | None = None,
        store: PublisherStore | None = None,
        gallery: GalleryFactory | None = None,
        reader: Reader | None = None,
        secret_reader: Reader | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger("vxp_core.app")
        self.cwd = Path(cwd)
        self.user_dirs = user_dirs or UserDirs()
        self.settings = settings or load_settings(user_dirs=self.user_dirs)
        self.events = events or EventBus()
        store_path = self.settings.store_path or self.user_dirs.config_dir() / STORE_FILE_NAME
        self.store = store or PublisherStore(store_path)
        self.gallery = gallery or gallery_factory(
            self.settings.gallery_url,
            timeout=self.settings.timeout_seconds,
        )
        self.reader = reader or read
        self.secret_reader = secret_reader or read_secret
        self.feature_registry = FeatureRegistry()
        self._builtins_registered = False

    def bootstrap(self) -> "VXPApp":
        if not self._builtins_registered:
            register_builtin_commands(self.feature_registry)
            self._builtins_registered = True
            self.logger.debug(
                "registered commands: %s",
                ", ".join(entry.name for entry in self.feature_registry.entries()),
            )
        return self

    def resolve_cwd(self, override: str | Path | None) -> Path:
        if not override:
            return self.cwd
        path = Path(override)
        return path if path.is_absolute() else (self.cwd / path)
