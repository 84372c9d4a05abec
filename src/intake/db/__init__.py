"""
Intake - Database Client.

Provides the shared Supabase client used by the submission gateway.
"""

from intake.db.client import get_client

__all__ = [
    "get_client",
]
