"""Layered settings: built-in defaults, ``config.toml``, then environment."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigurationError
from .paths import UserDirs

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
STORE_FILE_NAME = "publishers.json"
DEFAULT_GALLERY_URL = "https://marketplace.visualstudio.com"
DEFAULT_INSTALLATION_TARGET = "Microsoft.VisualStudio.Code"

_ENV_KEY_MAP: dict[str, str] = {
    "gallery_url": "VXP_GALLERY_URL",
    "store_path": "VXP_STORE",
    "timeout_seconds": "VXP_TIMEOUT",
}
CONFIG_ENV_KEY = "VXP_CONFIG"


@dataclass(frozen=True)
class Settings:
    gallery_url: str = DEFAULT_GALLERY_URL
    timeout_seconds: float = 30.0
    store_path: Path | None = None
    installation_target: str = DEFAULT_INSTALLATION_TARGET


def default_config_path(user_dirs: UserDirs | None = None) -> Path:
    return (user_dirs or UserDirs()).config_dir() / CONFIG_FILE_NAME


def _load_gallery_section(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    section = payload.get("gallery")
    return section if isinstance(section, dict) else {}


def _coerce(values: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if values.get("url") or values.get("gallery_url"):
        out["gallery_url"] = str(values.get("url") or values.get("gallery_url")).rstrip("/")
    if values.get("timeout_seconds") not in (None, ""):
        try:
            out["timeout_seconds"] = float(values["timeout_seconds"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"timeout_seconds must be a number, got {values['timeout_seconds']!r}"
            ) from exc
    if values.get("store_path"):
        out["store_path"] = Path(str(values["store_path"])).expanduser()
    if values.get("installation_target"):
        out["installation_target"] = str(values["installation_target"])
    return out


def load_settings(
    *,
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    user_dirs: UserDirs | None = None,
) -> Settings:
    """Resolve settings; later layers override earlier ones."""

    env = os.environ if env is None else env
    user_dirs = user_dirs or UserDirs()
    if config_path is None:
        override = env.get(CONFIG_ENV_KEY)
        config_path = Path(override).expanduser() if override else default_config_path(user_dirs)

    settings = Settings(store_path=user_dirs.config_dir() / STORE_FILE_NAME)
    file_values = _coerce(_load_gallery_section(config_path))
    env_values = _coerce(
        {key: env.get(name) for key, name in _ENV_KEY_MAP.items() if env.get(name)}
    )
    settings = replace(settings, **file_values)
    settings = replace(settings, **env_values)
    logger.debug("settings resolved from %s: %s", config_path, settings)
    return settings
