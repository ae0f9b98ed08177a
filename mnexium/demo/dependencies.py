"""Dependency injection for demo routes.

Provides the settings and the shared MnexiumClient. Both can be
overridden through `app.dependency_overrides` in tests.
"""

from typing import Annotated

from fastapi import Depends

from mnexium.client import MnexiumClient
from mnexium.config import Settings
from mnexium.config import get_settings as _load_settings
from mnexium.observability.logging import get_logger

logger = get_logger(__name__)

# Client instance - created once and reused
_client: MnexiumClient | None = None


def get_settings() -> Settings:
    """Get application settings (cached)."""
    return _load_settings()


def get_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> MnexiumClient:
    """Get the shared MnexiumClient.

    Created on first access from settings. A missing service key is
    logged but not fatal; the service answers 401 on each call.

    Returns:
        MnexiumClient configured from settings
    """
    global _client
    if _client is None:
        _client = MnexiumClient.from_settings(settings)
        if settings.api.key is None:
            logger.warning("mnexium_key_missing", msg="Set MNX_KEY or MNEXIUM_API__KEY")
        logger.info("mnexium_client_initialized", base_url=settings.api.base_url)
    return _client


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
ClientDep = Annotated[MnexiumClient, Depends(get_client)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing and on shutdown. Closes the client before resetting.
    """
    global _client

    if _client is not None:
        await _client.close()
        _client = None

    _load_settings.cache_clear()
