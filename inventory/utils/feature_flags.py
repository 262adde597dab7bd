"""Environment-driven switches for optional parts of the app.

Values are read once and cached; call ``refresh_feature_flag_cache`` after
changing the environment.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Dict, Literal, NamedTuple

logger = logging.getLogger(__name__)

FeatureFlagKey = Literal[
    "web_ui_enabled",
    "item_delete_enabled",
]

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


class FlagSpec(NamedTuple):
    env_var: str
    default: bool
    summary: str


FLAGS: Dict[FeatureFlagKey, FlagSpec] = {
    "web_ui_enabled": FlagSpec("WEB_UI_ENABLED", True, "server-rendered inventory pages"),
    "item_delete_enabled": FlagSpec("FEATURE_ITEM_DELETE_ENABLED", True, "delete buttons and the web delete route"),
}


def parse_flag(raw: str | None, default: bool) -> bool:
    """Interpret an environment value; unrecognised text keeps the default."""
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _FALSY:
        return False
    if value in _TRUTHY:
        return True
    logger.warning("Unrecognised feature flag value %r; using default %s", raw, default)
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> Dict[str, bool]:
    flags = {key: parse_flag(os.getenv(spec.env_var), spec.default) for key, spec in FLAGS.items()}
    disabled = sorted(key for key, enabled in flags.items() if not enabled)
    if disabled:
        logger.info("feature_flags_disabled: %s", ", ".join(disabled))
    return flags


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    return get_feature_flags()[flag]


def web_ui_enabled() -> bool:
    return is_feature_enabled("web_ui_enabled")


def item_delete_enabled() -> bool:
    return is_feature_enabled("item_delete_enabled")


def refresh_feature_flag_cache() -> None:
    get_feature_flags.cache_clear()
