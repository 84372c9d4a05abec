"""
Intake - Supabase Client.

Low-level database access. Table inserts and storage uploads all go
through the client returned here.
"""

from supabase import Client, create_client

from intake.config import get_settings

# Singleton client instance
_client: Client | None = None


def get_client() -> Client:
    """
    Get the Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _client

    if _client is None:
        settings = get_settings()
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client
