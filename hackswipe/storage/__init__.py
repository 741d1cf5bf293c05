"""
Storage module.

Handles persistence of per-user swipe sessions via Supabase or memory.
"""

from hackswipe.config import is_persistence_configured
from hackswipe.storage.base import SessionStore, SaveResult
from hackswipe.storage.supabase import SupabaseSessionStore, MockSessionStore


def get_session_store() -> SessionStore:
    """Get the configured session store (Supabase if configured, else memory)."""
    if is_persistence_configured():
        return SupabaseSessionStore()
    return MockSessionStore()


__all__ = [
    "SessionStore",
    "SaveResult",
    "SupabaseSessionStore",
    "MockSessionStore",
    "get_session_store",
]
