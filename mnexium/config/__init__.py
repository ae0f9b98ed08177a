"""Configuration loading for Mnexium.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from mnexium.config import get_settings

    settings = get_settings()
    base_url = settings.api.base_url
"""

from functools import lru_cache

from mnexium.config.loader import load_config
from mnexium.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{MNEXIUM_ENV}.toml (environment overrides)
    4. MNX_KEY / OPENAI_KEY style variables
    5. MNEXIUM_* environment variables (runtime overrides)

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    set_toml_config(load_config())

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
