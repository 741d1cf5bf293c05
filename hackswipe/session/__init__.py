"""
Session module.

Deterministic shuffling, the swipe state machine, and the controller
that persists it.
"""

from hackswipe.session.shuffle import seeded_random, shuffle_with_seed, build_queue
from hackswipe.session.scheduler import (
    Scheduler,
    ScheduledCall,
    TimerScheduler,
    ManualScheduler,
)
from hackswipe.session.state import SessionState, SessionStatus, SwipeDirection
from hackswipe.session.controller import SwipeSession

__all__ = [
    "seeded_random",
    "shuffle_with_seed",
    "build_queue",
    "Scheduler",
    "ScheduledCall",
    "TimerScheduler",
    "ManualScheduler",
    "SessionState",
    "SessionStatus",
    "SwipeDirection",
    "SwipeSession",
]
