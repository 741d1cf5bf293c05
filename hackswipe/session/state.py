"""
Swipe session state machine.

SessionState owns the queue and the mutable swipe state for one user:

    LOADING --finish_loading--> ACTIVE --swipe/advance--> ... --> EXHAUSTED
                                   ^                                  |
                                   +------------ reset ---------------+

A swipe is recorded immediately (history, then liked or passed). The
index moves only when advance() is called, which the controller does
after the exit delay. While an advance is pending, further swipes are
discarded so each displayed project receives at most one decision.

SessionState does no I/O and no locking; SwipeSession is its only writer.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence

from hackswipe.models.project import ProjectRecord
from hackswipe.models.snapshot import HistoryEntry, SessionSnapshot
from hackswipe.session.shuffle import build_queue


class SessionStatus(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class SwipeDirection(str, Enum):
    """A swipe decision. Right is like, left is pass."""
    LIKE = "like"
    PASS = "pass"
    
    @classmethod
    def parse(cls, value) -> "SwipeDirection":
        """
        Parse a direction name.
        
        Accepts "like", "pass", "right" and "left" in any case.
        
        Raises:
            ValueError: If the value is not a known direction.
        """
        if isinstance(value, cls):
            return value
        aliases = {
            "like": cls.LIKE,
            "right": cls.LIKE,
            "pass": cls.PASS,
            "left": cls.PASS,
        }
        key = str(value).strip().lower() if value is not None else ""
        if key not in aliases:
            raise ValueError(f"Unknown swipe direction: {value!r}")
        return aliases[key]


class SessionState:
    """
    Queue position plus liked, passed and history for one session.
    
    Invariant: len(history) == len(liked) + len(passed), and once any
    pending advance completes, current_index == len(history) (unless the
    state was hydrated from an older snapshot).
    """
    
    def __init__(self, corpus: Sequence[ProjectRecord], seed: int):
        self._corpus: List[ProjectRecord] = list(corpus)
        self.seed = seed
        self.queue: List[ProjectRecord] = []
        self.current_index = 0
        self.liked: List[ProjectRecord] = []
        self.passed: List[ProjectRecord] = []
        self.history: List[HistoryEntry] = []
        self._loading = False
        self._advance_pending = False
        self.initialize()
    
    # =========================================================================
    # Transitions
    # =========================================================================
    
    def initialize(
        self,
        corpus: Optional[Sequence[ProjectRecord]] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Rebuild the queue and clear all swipe state.
        
        Args:
            corpus: Replacement corpus (default: keep the current one).
            seed: Replacement seed (default: keep the current one).
        """
        if corpus is not None:
            self._corpus = list(corpus)
        if seed is not None:
            self.seed = seed
        self.queue = build_queue(self._corpus, self.seed)
        self.current_index = 0
        self.liked = []
        self.passed = []
        self.history = []
        self._advance_pending = False
    
    def begin_loading(self) -> None:
        self._loading = True
    
    def finish_loading(self) -> None:
        self._loading = False
    
    def hydrate(self, snapshot: SessionSnapshot) -> None:
        """
        Overwrite swipe state from a stored snapshot.
        
        The queue is left as built. An index past the end of the queue is
        kept as is and reads as EXHAUSTED.
        """
        self.liked = list(snapshot.liked)
        self.passed = list(snapshot.passed)
        self.history = list(snapshot.history)
        self.current_index = snapshot.current_index
        self._advance_pending = False
    
    def swipe(self, direction) -> bool:
        """
        Record a decision on the current project.
        
        Args:
            direction: SwipeDirection or a name accepted by SwipeDirection.parse.
            
        Returns:
            True if recorded; False if there is no current project, the
            session is loading, or the previous swipe has not advanced yet.
        """
        direction = SwipeDirection.parse(direction)
        project = self.current_project
        if project is None or self._advance_pending:
            return False
        
        liked = direction is SwipeDirection.LIKE
        self.history.append(HistoryEntry(project=project, liked=liked))
        if liked:
            self.liked.append(project)
        else:
            self.passed.append(project)
        
        self._advance_pending = True
        return True
    
    def advance(self) -> bool:
        """
        Move past the project that was just swiped.
        
        Returns:
            True if the index moved; False if no swipe was waiting.
        """
        if not self._advance_pending:
            return False
        self._advance_pending = False
        self.current_index += 1
        return True
    
    def reset(self) -> None:
        """Start over with a freshly shuffled queue (same seed)."""
        self.initialize()
    
    def reset_to_empty(self) -> None:
        """Drop the signed-in user's state; used on logout."""
        self.initialize()
    
    # =========================================================================
    # Queries
    # =========================================================================
    
    @property
    def status(self) -> SessionStatus:
        if self._loading:
            return SessionStatus.LOADING
        if self.is_exhausted:
            return SessionStatus.EXHAUSTED
        return SessionStatus.ACTIVE
    
    @property
    def is_exhausted(self) -> bool:
        return self.current_index >= len(self.queue)
    
    @property
    def advance_pending(self) -> bool:
        return self._advance_pending
    
    @property
    def current_project(self) -> Optional[ProjectRecord]:
        """The project on screen, or None when loading or exhausted."""
        if self._loading or self.is_exhausted:
            return None
        return self.queue[self.current_index]
    
    @property
    def remaining(self) -> int:
        return max(len(self.queue) - self.current_index, 0)
    
    def snapshot(self) -> SessionSnapshot:
        """Copy of the persistable state."""
        return SessionSnapshot(
            liked=list(self.liked),
            passed=list(self.passed),
            history=list(self.history),
            current_index=self.current_index,
        )
    
    def stats(self) -> Dict[str, int]:
        return {
            "liked": len(self.liked),
            "passed": len(self.passed),
            "seen": len(self.history),
            "remaining": self.remaining,
            "total": len(self.queue),
        }
    
    def __repr__(self) -> str:
        return (
            f"SessionState(status={self.status.value!r}, "
            f"current_index={self.current_index}, total={len(self.queue)})"
        )
