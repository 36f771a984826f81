# storefront/core/supabase_client.py
from supabase import create_client, Client

from storefront.core.config import Settings


def supabase_admin(settings: Settings) -> Client:
    """
    Create a Supabase client with the service role key.

    Used by the Supabase media backend to upload product images to
    the storage bucket and to delete them on rollback.

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError(
            "STORAGE_BACKEND=supabase needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY in .env"
        )
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
