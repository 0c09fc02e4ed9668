"""
Supabase Client Configuration

One service-role client shared by every service. Routes check manuscript
ownership themselves, so Row Level Security only guards direct browser
access to the tables.
"""

from functools import lru_cache

from supabase import create_client, Client

from scribe.config import config
from scribe.utils.logging import get_logger

db_logger = get_logger("database")


class SupabaseClientError(Exception):
    """Raised when Supabase client cannot be initialized."""
    pass


def _require(name: str) -> str:
    value = getattr(config, name)
    if not value:
        raise SupabaseClientError(
            f"{name} is not configured. Set it in your .env file or environment variables."
        )
    return value


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Service-role client (bypasses Row Level Security).

    Raises:
        SupabaseClientError: If the URL or service key is missing
    """
    return create_client(_require("SUPABASE_URL"), _require("SUPABASE_SERVICE_KEY"))


def verify_supabase_connection() -> bool:
    """Whether the manuscripts table can be queried."""
    try:
        get_supabase_admin_client().table("manuscripts").select("id").limit(1).execute()
    except Exception as e:
        db_logger.error("Supabase connection failed", error=str(e))
        return False
    return True
