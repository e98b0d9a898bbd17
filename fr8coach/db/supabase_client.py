"""Supabase client initialization."""

from functools import lru_cache

from supabase import Client, create_client

from fr8coach.core.config import Settings
from fr8coach.core.exceptions import ConfigurationError


@lru_cache(maxsize=4)
def _create_client(url: str, key: str) -> Client:
    try:
        return create_client(url, key)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e


def get_supabase(settings: Settings) -> Client:
    """
    Get Supabase client for the configured project (cached per URL/key).

    Args:
        settings: Application settings

    Returns:
        Supabase client configured with service role key

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing
        RuntimeError: If client initialization fails
    """
    if not settings.supabase_configured:
        raise ConfigurationError("Knowledge store is not configured.")
    return _create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
