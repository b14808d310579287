"""Platform-independent helpers for vxp paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

_DEFAULT_APP_NAME = "vxp"
_DEFAULT_APP_AUTHOR = "vxp"


@dataclass(frozen=True)
class UserDirs:
    """Expose the platform-configured location of the vxp config tree."""

    app_name: str = _DEFAULT_APP_NAME
    app_author: str = _DEFAULT_APP_AUTHOR
    config_dir_override: Path | None = None

    def config_dir(self) -> Path:
        return (
            self.config_dir_override
            if self.config_dir_override
            else Path(user_config_dir(self.app_name, appauthor=self.app_author))
        )
