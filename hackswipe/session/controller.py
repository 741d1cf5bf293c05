"""
Swipe session controller.

SwipeSession is the single writer for a SessionState. Every event (a
swipe, the exit-delay timer, a debounce timer, login, logout, reset)
takes the same lock, so events are applied one at a time in arrival
order regardless of which thread delivers them.

Persistence policy:
- any change to liked/passed/history/current_index restarts the save
  debounce while a user is signed in and their data has loaded;
- reset() saves immediately;
- logout() cancels pending work and never deletes the remote copy;
- save failures are logged and retried naturally by the next change.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from hackswipe.config import (
    SHUFFLE_SEED,
    SAVE_DEBOUNCE_SECONDS,
    SWIPE_EXIT_DELAY_SECONDS,
)
from hackswipe.models.project import ProjectRecord
from hackswipe.models.snapshot import HistoryEntry, SessionSnapshot
from hackswipe.session.scheduler import ScheduledCall, Scheduler, TimerScheduler
from hackswipe.session.state import SessionState, SessionStatus, SwipeDirection
from hackswipe.storage.base import SaveResult, SessionStore

logger = logging.getLogger(__name__)


class SwipeSession:
    """
    Owns one SessionState plus the timers and identity around it.
    
    Usage:
        session = SwipeSession(corpus, store=SupabaseSessionStore())
        session.login(user_id)
        session.swipe("like")
        session.current_project
    
    Without a store, or before login, the session is local-only and never
    touches storage.
    """
    
    def __init__(
        self,
        corpus: Sequence[ProjectRecord],
        store: Optional[SessionStore] = None,
        seed: int = SHUFFLE_SEED,
        scheduler: Optional[Scheduler] = None,
        exit_delay: float = SWIPE_EXIT_DELAY_SECONDS,
        save_delay: float = SAVE_DEBOUNCE_SECONDS,
    ):
        """
        Initialize the session.
        
        Args:
            corpus: Project records to swipe through.
            store: Persistence backend (None for local-only).
            seed: Shuffle seed.
            scheduler: Delayed-call scheduler. Defaults to TimerScheduler().
            exit_delay: Seconds between a swipe and the next project (0 = immediate).
            save_delay: Debounce quiet period before saving.
        """
        self._lock = threading.RLock()
        self._state = SessionState(corpus, seed)
        self._store = store
        self._scheduler = scheduler or TimerScheduler()
        self.exit_delay = exit_delay
        self.save_delay = save_delay
        
        self._identity: Optional[str] = None
        # Bumped on every login/logout so a slow load can't hydrate the wrong user
        self._generation = 0
        self._advance_call: Optional[ScheduledCall] = None
        self._save_call: Optional[ScheduledCall] = None
        self._saving = False
        self.last_save: Optional[SaveResult] = None
        
        # Store writes are serialized; a snapshot older than the last one
        # written is skipped
        self._write_lock = threading.Lock()
        self._save_seq = 0
        self._written_seq = 0
    
    # =========================================================================
    # Identity lifecycle
    # =========================================================================
    
    def login(self, identity: str) -> bool:
        """
        Attach an identity and restore its saved progress.
        
        The session reads as LOADING while the store is queried; swipes
        arriving meanwhile are ignored. A missing or unreadable snapshot
        starts a fresh session.
        
        Args:
            identity: Opaque user identifier from the auth provider.
        
        Returns:
            True if a saved snapshot was restored.
        """
        with self._lock:
            self._identity = identity
            self._generation += 1
            generation = self._generation
            
            if self._store is None:
                return False
            
            self._cancel_save()
            self._cancel_advance()
            self._state.begin_loading()
        
        snapshot = self._load(identity)
        
        with self._lock:
            if generation != self._generation:
                # Logged out or switched user while loading
                return False
            
            if snapshot is not None:
                self._state.hydrate(snapshot)
                logger.info(
                    "Restored session for %s at index %d (%d liked, %d passed)",
                    identity, snapshot.current_index, len(snapshot.liked), len(snapshot.passed),
                    extra={"identity": identity, "current_index": snapshot.current_index},
                )
            else:
                self._state.initialize()
                logger.info("Starting fresh session for %s", identity, extra={"identity": identity})
            
            self._state.finish_loading()
            
            if self._state.current_index > len(self._state.queue):
                logger.warning(
                    "Saved index %d is past the end of the queue (%d projects)",
                    self._state.current_index, len(self._state.queue),
                    extra={"identity": identity, "current_index": self._state.current_index},
                )
            
            return snapshot is not None
    
    def logout(self) -> None:
        """
        Detach the identity and return to an empty local session.
        
        Pending saves are dropped; the stored copy is left untouched.
        """
        with self._lock:
            self._cancel_save()
            self._cancel_advance()
            previous = self._identity
            self._identity = None
            self._generation += 1
            self._state.reset_to_empty()
            self._state.finish_loading()
        
        if previous is not None:
            logger.info("Logged out %s", previous, extra={"identity": previous})
    
    # =========================================================================
    # Swipe transitions
    # =========================================================================
    
    def swipe(self, direction) -> bool:
        """
        Like or pass the current project.
        
        Args:
            direction: SwipeDirection or "like"/"pass"/"right"/"left".
        
        Returns:
            True if the swipe was recorded; False if it was ignored
            (nothing to swipe, still loading, or previous card still leaving).
        
        Raises:
            ValueError: If direction is not a known direction.
        """
        direction = SwipeDirection.parse(direction)
        
        with self._lock:
            if not self._state.swipe(direction):
                logger.debug(
                    "Ignored %s swipe (status=%s)", direction.value, self._state.status.value,
                    extra={"direction": direction.value, "current_index": self._state.current_index},
                )
                return False
            
            if self.exit_delay > 0:
                self._advance_call = self._call_later(self.exit_delay, self._complete_advance)
            else:
                self._state.advance()
            
            self._schedule_save()
            return True
    
    def _complete_advance(self, call: ScheduledCall) -> None:
        with self._lock:
            # Timer fired, then lost the race for the lock to a cancel
            if call is not self._advance_call:
                return
            self._advance_call = None
            if self._state.advance():
                self._schedule_save()
    
    def reset(self) -> Optional[SaveResult]:
        """
        Start over: clear liked, passed and history and rebuild the queue.
        
        When signed in, the cleared state is saved immediately.
        
        Returns:
            SaveResult of the immediate save, or None when local-only.
        """
        with self._lock:
            self._cancel_save()
            self._cancel_advance()
            self._state.reset()
            
            if not self._can_persist():
                return None
            pending = self._pending_save()
        
        return self._save(*pending)
    
    # =========================================================================
    # Timers
    # =========================================================================
    
    def _call_later(
        self,
        delay: float,
        callback: Callable[[ScheduledCall], None],
    ) -> ScheduledCall:
        """
        Schedule callback(handle) so it can tell whether it is still current.
        
        Caller holds the lock, so the handle is stored before fire() can read it.
        """
        handle: List[ScheduledCall] = []
        
        def fire() -> None:
            with self._lock:
                call = handle[0]
            callback(call)
        
        handle.append(self._scheduler.call_later(delay, fire))
        return handle[0]
    
    def _cancel_save(self) -> None:
        if self._save_call is not None:
            self._save_call.cancel()
            self._save_call = None
    
    def _cancel_advance(self) -> None:
        if self._advance_call is not None:
            self._advance_call.cancel()
            self._advance_call = None
    
    def close(self) -> None:
        """Cancel all pending timers."""
        with self._lock:
            self._cancel_save()
            self._cancel_advance()
    
    # =========================================================================
    # Persistence
    # =========================================================================
    
    def _can_persist(self) -> bool:
        return (
            self._store is not None
            and self._identity is not None
            and self._state.status is not SessionStatus.LOADING
        )
    
    def _schedule_save(self) -> None:
        """Restart the debounce timer."""
        if not self._can_persist():
            return
        self._cancel_save()
        self._save_call = self._call_later(self.save_delay, self._debounced_save)
    
    def _debounced_save(self, call: ScheduledCall) -> None:
        with self._lock:
            if call is not self._save_call:
                return
            self._save_call = None
            if not self._can_persist():
                return
            pending = self._pending_save()
        
        self._save(*pending)
    
    def flush(self) -> Optional[SaveResult]:
        """
        Run a pending debounced save now.
        
        Returns:
            SaveResult if a save was pending, None otherwise.
        """
        with self._lock:
            if self._save_call is None or not self._save_call.active:
                return None
            self._cancel_save()
            if not self._can_persist():
                return None
            pending = self._pending_save()
        
        return self._save(*pending)
    
    def _pending_save(self) -> Tuple[int, str, SessionSnapshot]:
        """Number and capture the state to write. Caller holds the lock."""
        self._save_seq += 1
        return self._save_seq, self._identity, self._state.snapshot()
    
    def _load(self, identity: str) -> Optional[SessionSnapshot]:
        try:
            return self._store.load(identity)
        except Exception:
            logger.exception("Unexpected error loading session for %s", identity,
                             extra={"identity": identity})
            return None
    
    def _save(self, seq: int, identity: str, snapshot: SessionSnapshot) -> SaveResult:
        with self._write_lock:
            if seq < self._written_seq:
                logger.debug("Skipping superseded save %d for %s", seq, identity,
                             extra={"identity": identity})
                return SaveResult(success=True)
            self._written_seq = seq
            
            with self._lock:
                self._saving = True
            try:
                result = self._store.save(identity, snapshot)
            except Exception as e:
                logger.exception("Unexpected error saving session for %s", identity,
                                 extra={"identity": identity})
                result = SaveResult(success=False, error=str(e))
            finally:
                with self._lock:
                    self._saving = False
        
        extra = {"identity": identity, "current_index": snapshot.current_index}
        if result.success:
            logger.debug("Saved session for %s at index %d", identity, snapshot.current_index,
                         extra=extra)
        else:
            logger.warning("Failed to save session for %s: %s", identity, result.error,
                           extra=extra)
        
        self.last_save = result
        return result
    
    # =========================================================================
    # Read access
    # =========================================================================
    
    @property
    def identity(self) -> Optional[str]:
        return self._identity
    
    @property
    def status(self) -> SessionStatus:
        with self._lock:
            return self._state.status
    
    @property
    def current_project(self) -> Optional[ProjectRecord]:
        with self._lock:
            return self._state.current_project
    
    @property
    def current_index(self) -> int:
        with self._lock:
            return self._state.current_index
    
    @property
    def queue(self) -> List[ProjectRecord]:
        with self._lock:
            return list(self._state.queue)
    
    @property
    def liked(self) -> List[ProjectRecord]:
        with self._lock:
            return list(self._state.liked)
    
    @property
    def passed(self) -> List[ProjectRecord]:
        with self._lock:
            return list(self._state.passed)
    
    @property
    def history(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._state.history)
    
    def history_entry(self, index: int) -> Optional[HistoryEntry]:
        """Return one history entry for review, or None if out of range."""
        with self._lock:
            if 0 <= index < len(self._state.history):
                return self._state.history[index]
            return None
    
    @property
    def is_saving(self) -> bool:
        with self._lock:
            return self._saving
    
    @property
    def save_pending(self) -> bool:
        with self._lock:
            return self._save_call is not None and self._save_call.active
    
    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._state.snapshot()
    
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return self._state.stats()
    
    def __repr__(self) -> str:
        return f"<SwipeSession identity={self._identity!r} state={self._state!r}>"
