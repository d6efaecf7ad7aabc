# keep/core/supabase_client.py
from functools import lru_cache
from supabase import create_client, Client

from keep.core.config import get_settings

settings = get_settings()


@lru_cache
def supabase_admin() -> Client:
    """
    Create a Supabase client with the service role key.

    Use cases:
      - uploading to / signing URLs from the private document bucket
      - removing stored files when their asset is deleted

    Every path written through this client is checked against the
    requester's folder prefix in `keep.core.storage_utils`, because the
    service role itself bypasses the bucket policies.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
