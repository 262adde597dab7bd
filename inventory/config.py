"""
Runtime configuration for the inventory manager.

Settings come from a JSON file located with XDG conventions and can be
overridden per process through environment variables. The loaded value is
cached; call ``refresh_config_cache`` after changing the environment.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

ENV_CONFIG_PATH = "INVENTORY_CONFIG"
CONFIG_FILE_NAME = "inventory.json"
XDG_APP_DIR = "inventory"

DEFAULT_CURRENCY = "JPY"
DEFAULT_DATABASE_PATH = "inventory.db"

_KNOWN_KEYS = {
    "default_currency",
    "database_path",
    "default_page_limit",
    "default_sort_by",
    "default_order_by",
}


class ConfigError(ValueError):
    """Raised when a configuration file holds values of the wrong shape."""


@dataclass
class InventoryConfig:
    default_currency: Optional[str] = None
    database_path: Optional[str] = None
    default_page_limit: Optional[int] = None
    default_sort_by: Optional[List[str]] = field(default=None)
    default_order_by: Optional[str] = None
    source: Optional[Path] = None

    @property
    def currency(self) -> str:
        return self.default_currency or DEFAULT_CURRENCY

    @classmethod
    def from_dict(cls, data: dict, source: Optional[Path] = None) -> "InventoryConfig":
        if not isinstance(data, dict):
            raise ConfigError("configuration root must be a JSON object")
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(sorted(unknown)))

        limit = data.get("default_page_limit")
        if limit is not None and (not isinstance(limit, int) or isinstance(limit, bool) or limit < 0):
            raise ConfigError("default_page_limit must be a non-negative integer")

        sort_by = data.get("default_sort_by")
        if isinstance(sort_by, str):
            sort_by = [part.strip() for part in sort_by.split(",") if part.strip()]
        if sort_by is not None and not (isinstance(sort_by, list) and all(isinstance(s, str) for s in sort_by)):
            raise ConfigError("default_sort_by must be a list of field names")

        order_by = data.get("default_order_by")
        if order_by is not None:
            order_by = str(order_by).lower()
            if order_by not in ("asc", "desc"):
                raise ConfigError("default_order_by must be 'asc' or 'desc'")

        for key in ("default_currency", "database_path"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{key} must be a string")

        return cls(
            default_currency=data.get("default_currency") or None,
            database_path=data.get("database_path") or None,
            default_page_limit=limit,
            default_sort_by=sort_by or None,
            default_order_by=order_by,
            source=source,
        )

    @classmethod
    def from_file(cls, path: Path) -> "InventoryConfig":
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls.from_dict(data, source=path)


def config_search_paths() -> List[Path]:
    """Candidate config files, highest priority first."""
    paths: List[Path] = []
    explicit = os.getenv(ENV_CONFIG_PATH)
    if explicit:
        paths.append(Path(explicit).expanduser())

    xdg_home = os.getenv("XDG_CONFIG_HOME")
    config_dir = Path(xdg_home).expanduser() if xdg_home else Path.home() / ".config"
    paths.append(config_dir / XDG_APP_DIR / CONFIG_FILE_NAME)

    paths.append(Path.home() / CONFIG_FILE_NAME)
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


@lru_cache(maxsize=None)
def get_config() -> InventoryConfig:
    """Load the first config file found; fall back to defaults on any problem."""
    for path in config_search_paths():
        if not path.is_file():
            continue
        try:
            config = InventoryConfig.from_file(path)
        except (OSError, json.JSONDecodeError, ConfigError) as exc:
            logger.warning("Failed to load configuration from %s: %s; using defaults", path, exc)
            return InventoryConfig()
        logger.info("Loaded configuration from %s", path)
        return config
    return InventoryConfig()


def refresh_config_cache() -> None:
    """Drop the cached configuration (useful for tests)."""
    get_config.cache_clear()


def database_url(config: Optional[InventoryConfig] = None) -> str:
    """Resolve the SQLAlchemy URL: DATABASE_URL wins over the config file."""
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    config = config or get_config()
    path = config.database_path or DEFAULT_DATABASE_PATH
    return f"sqlite:///{Path(path).expanduser()}"
