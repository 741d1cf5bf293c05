"""
Persisted session data.

A SessionSnapshot is what the storage layer reads and writes for one
identity: liked and passed projects, the full swipe history, and the
position in the queue. The queue itself is never stored; it is rebuilt
from the corpus on every load.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from hackswipe.models.project import ProjectRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One swipe decision."""
    project: ProjectRecord
    liked: bool
    
    def to_dict(self) -> Dict[str, Any]:
        return {"project": self.project.to_dict(), "liked": self.liked}
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            project=ProjectRecord.from_dict(data["project"]),
            liked=bool(data.get("liked", False)),
        )


@dataclass
class SessionSnapshot:
    """
    The mutable part of a swipe session.
    
    Attributes:
        liked: Projects swiped right, in swipe order.
        passed: Projects swiped left, in swipe order.
        history: Every decision, in swipe order.
        current_index: Position of the next project in the queue.
    """
    liked: List[ProjectRecord] = field(default_factory=list)
    passed: List[ProjectRecord] = field(default_factory=list)
    history: List[HistoryEntry] = field(default_factory=list)
    current_index: int = 0
    
    @property
    def is_empty(self) -> bool:
        return not (self.liked or self.passed or self.history) and self.current_index == 0
    
    def to_row(self) -> Dict[str, Any]:
        """
        Convert to the stored row shape.
        
        Returns:
            Dict with liked_projects, passed_projects, history, current_index.
        """
        return {
            "liked_projects": [p.to_dict() for p in self.liked],
            "passed_projects": [p.to_dict() for p in self.passed],
            "history": [entry.to_dict() for entry in self.history],
            "current_index": self.current_index,
        }
    
    @classmethod
    def from_row(cls, row: Optional[Dict[str, Any]]) -> "SessionSnapshot":
        """
        Create a snapshot from a stored row.
        
        Missing keys fall back to empty lists and index 0. Entries that no
        longer parse as projects are skipped.
        
        Args:
            row: Stored row (may be None).
            
        Returns:
            New SessionSnapshot instance.
        """
        row = row or {}
        
        try:
            current_index = int(row.get("current_index") or 0)
        except (TypeError, ValueError):
            current_index = 0
        
        return cls(
            liked=_parse_list(row.get("liked_projects"), ProjectRecord.from_dict),
            passed=_parse_list(row.get("passed_projects"), ProjectRecord.from_dict),
            history=_parse_list(row.get("history"), HistoryEntry.from_dict),
            current_index=max(current_index, 0),
        )


def _parse_list(values, parse) -> list:
    parsed = []
    for value in values or []:
        try:
            parsed.append(parse(value))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Skipping unreadable snapshot entry: %s", e)
    return parsed
