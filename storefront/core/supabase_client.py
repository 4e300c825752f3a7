# storefront/core/supabase_client.py
from functools import lru_cache

from supabase import Client, create_client


@lru_cache
def supabase_admin(url: str | None, service_role_key: str | None) -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - uploading STL files to the storage bucket

    WARNING:
      - Never expose service role key to frontend.
      - Only backend should call this.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not url or not service_role_key:
        raise RuntimeError("FILE_STORE=supabase needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
    return create_client(url, service_role_key)
