"""Configuration entry points.

Usage:
    from emissary.config import get_settings

    settings = get_settings()
    hops = settings.a2a.default_max_auto_reply_hops
"""

from functools import lru_cache

from emissary.config.loader import load_config
from emissary.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once from the TOML layers and environment."""
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and read the TOML layers again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
