"""
Supabase storage backend for HackSwipe.

Implements the SessionStore interface on top of Supabase's PostgREST API.
Uses plain HTTP requests; no Supabase client library is needed.

PostgREST documentation: https://postgrest.org/en/stable/references/api.html

=============================================================================
TABLE SCHEMA
=============================================================================

| Column          | Type        | Description                              |
|-----------------|-------------|------------------------------------------|
| user_id         | uuid (PK)   | Identity from the auth provider          |
| liked_projects  | jsonb       | Liked project records, in swipe order    |
| passed_projects | jsonb       | Passed project records, in swipe order   |
| history         | jsonb       | [{project, liked}] in swipe order        |
| current_index   | integer     | Position in the shuffled queue           |
| updated_at      | timestamptz | Last write                               |

Row level security should restrict each user to their own row.

=============================================================================
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import requests

from hackswipe.config import (
    SUPABASE_URL,
    SUPABASE_KEY,
    SUPABASE_TABLE,
    REQUEST_TIMEOUT,
)
from hackswipe.models.snapshot import SessionSnapshot
from hackswipe.storage.base import SessionStore, SaveResult

logger = logging.getLogger(__name__)


class SupabaseSessionStore(SessionStore):
    """
    Supabase-backed session storage.
    
    One row per identity. Saves are upserts (merge-duplicates on user_id),
    so repeated or redundant saves are harmless and the last write wins.
    
    Configuration is pulled from environment variables via hackswipe.config:
    - SUPABASE_URL: Project URL
    - SUPABASE_KEY: API key
    - SUPABASE_TABLE: Table name
    """
    
    REST_PATH = "/rest/v1"
    
    def __init__(
        self,
        url: str = None,
        api_key: str = None,
        table_name: str = None,
        access_token: str = None,
        timeout: int = None,
    ):
        """
        Initialize SupabaseSessionStore.
        
        Args:
            url: Project URL. Defaults to config.SUPABASE_URL.
            api_key: API key. Defaults to config.SUPABASE_KEY.
            table_name: Table name. Defaults to config.SUPABASE_TABLE.
            access_token: User JWT for row level security. Defaults to api_key.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        # Fall back to config only if None (not empty string)
        self.url = (url if url is not None else SUPABASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else SUPABASE_KEY
        self.table_name = table_name if table_name is not None else SUPABASE_TABLE
        self.access_token = access_token
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
    
    @property
    def name(self) -> str:
        return "supabase"
    
    @property
    def _table_url(self) -> str:
        return f"{self.url}{self.REST_PATH}/{self.table_name}"
    
    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
    
    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.url:
            raise ValueError("SUPABASE_URL is not configured")
        if not self.api_key:
            raise ValueError("SUPABASE_KEY is not configured")
        if not self.table_name:
            raise ValueError("SUPABASE_TABLE is not configured")
    
    # =========================================================================
    # Serialization: SessionSnapshot <-> row
    # =========================================================================
    
    @staticmethod
    def snapshot_to_row(identity: str, snapshot: SessionSnapshot) -> Dict:
        row = snapshot.to_row()
        row["user_id"] = identity
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        return row
    
    @staticmethod
    def row_to_snapshot(row: Dict) -> SessionSnapshot:
        return SessionSnapshot.from_row(row)
    
    # =========================================================================
    # SessionStore Interface Implementation
    # =========================================================================
    
    def load(self, identity: str) -> Optional[SessionSnapshot]:
        """
        Fetch the row for identity.
        
        Returns:
            SessionSnapshot if a row exists, None if absent or on error.
        """
        self._validate_config()
        
        try:
            response = requests.get(
                self._table_url,
                headers=self._headers,
                params={"user_id": f"eq.{identity}", "select": "*", "limit": 1},
                timeout=self.timeout,
            )
            response.raise_for_status()
            rows = response.json()
        except requests.RequestException as e:
            logger.warning("Failed to load session for %s: %s", identity, e)
            return None
        except ValueError as e:
            logger.warning("Unreadable session response for %s: %s", identity, e)
            return None
        
        if not rows:
            return None
        
        return self.row_to_snapshot(rows[0])
    
    def save(self, identity: str, snapshot: SessionSnapshot) -> SaveResult:
        """
        Upsert the row for identity.
        
        Returns:
            SaveResult with success flag and error message.
        """
        self._validate_config()
        
        headers = dict(self._headers)
        headers["Prefer"] = "resolution=merge-duplicates,return=minimal"
        
        try:
            response = requests.post(
                self._table_url,
                headers=headers,
                params={"on_conflict": "user_id"},
                json=self.snapshot_to_row(identity, snapshot),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return SaveResult(success=True)
        except requests.RequestException as e:
            return SaveResult(success=False, error=str(e))


class MockSessionStore(SessionStore):
    """
    In-memory session storage for testing and development.
    
    Data is stored in memory and lost when the process ends.
    """
    
    def __init__(self):
        self._rows: Dict[str, SessionSnapshot] = {}
        self.fail_saves = False
        self.fail_loads = False
        self.save_calls = 0
        self.load_calls = 0
    
    @property
    def name(self) -> str:
        return "mock"
    
    def load(self, identity: str) -> Optional[SessionSnapshot]:
        self.load_calls += 1
        if self.fail_loads:
            return None
        stored = self._rows.get(identity)
        if stored is None:
            return None
        return SessionSnapshot.from_row(stored.to_row())
    
    def save(self, identity: str, snapshot: SessionSnapshot) -> SaveResult:
        self.save_calls += 1
        if self.fail_saves:
            return SaveResult(success=False, error="simulated save failure")
        # Store a copy so later mutations of the caller's lists don't leak in
        self._rows[identity] = SessionSnapshot.from_row(snapshot.to_row())
        return SaveResult(success=True)
    
    def get(self, identity: str) -> Optional[SessionSnapshot]:
        """Return the stored snapshot without counting a load (for testing)."""
        return self._rows.get(identity)
    
    def clear(self) -> None:
        """Clear all rows (for testing)."""
        self._rows.clear()
    
    def count(self) -> int:
        """Return number of stored rows (for testing)."""
        return len(self._rows)
