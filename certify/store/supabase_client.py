from __future__ import annotations

from supabase import Client, create_client

from app.core.settings import settings

_client = None


def get_supabase_client() -> Client:
    global _client
    if _client is None:
        if not settings.supabase_url or not settings.supabase_key:
            raise RuntimeError(
                "SUPABASE_URL / SUPABASE_KEY are missing. Set them in your environment."
            )
        _client = create_client(settings.supabase_url, settings.supabase_key)
    return _client
