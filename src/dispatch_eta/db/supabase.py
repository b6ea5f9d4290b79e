"""Supabase client for the order store."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the process-wide Supabase client, or None when ETA_SUPABASE_URL/KEY are unset.

    Creating the client does not open a connection; query failures surface later
    as OrderStoreError from the order store.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Order store credentials not configured (ETA_SUPABASE_URL / ETA_SUPABASE_KEY)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {exc}")
        return None
