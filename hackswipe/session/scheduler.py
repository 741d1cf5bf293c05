"""
Cancellable delayed calls.

The session controller uses a scheduler for the exit delay after a swipe
and for the save debounce. TimerScheduler runs callbacks on
threading.Timer threads; ManualScheduler only runs them when its clock is
advanced, which keeps tests deterministic.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional


class ScheduledCall(ABC):
    """Handle for a pending delayed call."""
    
    @abstractmethod
    def cancel(self) -> None:
        """Prevent the call from running. No effect if it already ran."""
        pass
    
    @property
    @abstractmethod
    def active(self) -> bool:
        """True while the call is neither run nor cancelled."""
        pass


class Scheduler(ABC):
    """Abstract base class for schedulers."""
    
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """
        Run callback after delay seconds.
        
        Args:
            delay: Seconds to wait (0 runs as soon as possible).
            callback: Zero-argument callable.
            
        Returns:
            Handle that can cancel the call.
        """
        pass
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


# =============================================================================
# Thread-backed scheduler
# =============================================================================

class _TimerCall(ScheduledCall):
    def __init__(self, delay: float, callback: Callable[[], None]):
        self._done = threading.Event()
        self._callback = callback
        self._timer = threading.Timer(delay, self._run)
        self._timer.daemon = True
    
    def _run(self) -> None:
        if self._done.is_set():
            return
        self._done.set()
        self._callback()
    
    def start(self) -> None:
        self._timer.start()
    
    def cancel(self) -> None:
        self._done.set()
        self._timer.cancel()
    
    @property
    def active(self) -> bool:
        return not self._done.is_set()


class TimerScheduler(Scheduler):
    """Runs each callback on its own daemon threading.Timer."""
    
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _TimerCall(max(delay, 0.0), callback)
        call.start()
        return call


# =============================================================================
# Manually driven scheduler
# =============================================================================

class _ManualCall(ScheduledCall):
    def __init__(self, due: float, order: int, callback: Callable[[], None]):
        self.due = due
        self.order = order
        self.callback = callback
        self.cancelled = False
        self.ran = False
    
    def cancel(self) -> None:
        self.cancelled = True
    
    @property
    def active(self) -> bool:
        return not (self.cancelled or self.ran)


class ManualScheduler(Scheduler):
    """
    Scheduler whose clock only moves when advance() is called.
    
    Calls due at the same time run in the order they were scheduled.
    Callbacks may schedule further calls; those run in the same advance()
    if they fall due within it.
    """
    
    def __init__(self):
        self.now = 0.0
        self._calls: List[_ManualCall] = []
        self._counter = 0
    
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        self._counter += 1
        call = _ManualCall(self.now + max(delay, 0.0), self._counter, callback)
        self._calls.append(call)
        return call
    
    def _next_due(self, until: float) -> Optional[_ManualCall]:
        pending = [c for c in self._calls if c.active and c.due <= until]
        if not pending:
            return None
        return min(pending, key=lambda c: (c.due, c.order))
    
    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run every call that falls due.
        
        Args:
            seconds: How far to move the clock.
            
        Returns:
            Number of callbacks run.
        """
        target = self.now + seconds
        ran = 0
        while True:
            call = self._next_due(target)
            if call is None:
                break
            self.now = call.due
            call.ran = True
            call.callback()
            ran += 1
        self.now = target
        self._calls = [c for c in self._calls if c.active]
        return ran
    
    def run_all(self) -> int:
        """Run every pending call regardless of its delay."""
        ran = 0
        while self.pending:
            latest = max(c.due for c in self._calls if c.active)
            ran += self.advance(max(latest - self.now, 0.0))
        return ran
    
    @property
    def pending(self) -> int:
        """Number of calls still waiting to run."""
        return sum(1 for c in self._calls if c.active)
