"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...exceptions import ConfigurationError

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/providers", status_code=status.HTTP_200_OK)
def health_providers() -> dict:
    """Report whether the routing providers are configured. Makes no outbound calls."""
    try:
        config = settings.routing_config()
    except ConfigurationError as exc:
        return {"service": "routing", "configured": False, "error": str(exc)}
    return {
        "service": "routing",
        "configured": True,
        "region": config.region,
        "timeout_seconds": config.timeout_seconds,
    }


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check order store connection."""
    from ...db.supabase import get_supabase_client

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set ETA_SUPABASE_URL and ETA_SUPABASE_KEY environment variables.",
        }

    try:
        supabase.table(settings.orders_table).select("id").limit(1).execute()
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
    return {
        "configured": True,
        "connected": True,
        "message": f"Database connected. Table '{settings.orders_table}' is reachable.",
    }
