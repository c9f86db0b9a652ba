"""
Mealink - Supabase Client.

Low-level database access. All store clients are built on this.
"""

import logging

from supabase import AsyncClient, acreate_client

from mealink.config import Settings, get_settings
from mealink.errors import BackendUnavailableError

logger = logging.getLogger(__name__)

# Singleton client instance
_client: AsyncClient | None = None


async def get_client(config: Settings | None = None) -> AsyncClient:
    """
    Get the async Supabase client.

    Uses singleton pattern to reuse connection.

    Raises:
        BackendUnavailableError: SUPABASE_URL / SUPABASE_ANON_KEY not set
    """
    global _client

    if _client is None:
        config = config or get_settings()
        if not config.is_supabase_configured:
            logger.info("Supabase not configured (missing URL or anon key)")
            raise BackendUnavailableError()
        logger.debug(f"Creating Supabase client for {config.supabase_url}")
        _client = await acreate_client(
            config.supabase_url,
            config.supabase_anon_key,
        )

    return _client


async def get_client_if_configured(config: Settings | None = None) -> AsyncClient | None:
    """Like get_client(), but returns None instead of raising."""
    config = config or get_settings()
    if not config.is_supabase_configured:
        return None
    return await get_client(config)


def reset_client() -> None:
    """Drop the cached client (tests, or after an event loop shuts down)."""
    global _client
    _client = None
