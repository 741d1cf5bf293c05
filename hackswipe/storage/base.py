"""
Base storage abstraction for HackSwipe.

Defines the interface the session controller needs from a persistence
backend: load and save one snapshot per identity. This allows swapping
between Supabase, an in-memory store, or anything else with
last-write-wins semantics.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from hackswipe.models.snapshot import SessionSnapshot


@dataclass
class SaveResult:
    """
    Result of a save operation.
    
    Attributes:
        success: Whether the snapshot was written.
        error: Error message if the write failed.
    """
    success: bool
    error: Optional[str] = None
    
    def __str__(self) -> str:
        if self.success:
            return "SaveResult(success=True)"
        return f"SaveResult(success=False, error={self.error!r})"


class SessionStore(ABC):
    """
    Abstract base class for session persistence backends.
    
    Implementations must not raise for expected failures (network errors,
    missing rows): load returns None and save returns a failed SaveResult.
    Saves must be idempotent upserts keyed by identity.
    """
    
    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the name of this storage backend.
        
        Used for logging and debugging.
        """
        pass
    
    @abstractmethod
    def load(self, identity: str) -> Optional[SessionSnapshot]:
        """
        Fetch the last saved snapshot for an identity.
        
        Args:
            identity: Opaque user identifier.
            
        Returns:
            The snapshot, or None if there is none or it could not be read.
        """
        pass
    
    @abstractmethod
    def save(self, identity: str, snapshot: SessionSnapshot) -> SaveResult:
        """
        Insert or replace the snapshot for an identity.
        
        Args:
            identity: Opaque user identifier.
            snapshot: State to persist.
            
        Returns:
            SaveResult describing the outcome.
        """
        pass
    
    def __str__(self) -> str:
        return f"SessionStore({self.name})"
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
