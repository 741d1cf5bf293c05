"""
Data models module.

Defines project records and the persisted session snapshot.
"""

from hackswipe.models.project import ProjectRecord
from hackswipe.models.snapshot import HistoryEntry, SessionSnapshot

__all__ = [
    "ProjectRecord",
    "HistoryEntry",
    "SessionSnapshot",
]
