"""
Session Controller Tests

Covers the exit delay, the save debounce and the login/logout lifecycle.
Timers are driven by ManualScheduler so every test is deterministic; one
test uses the real TimerScheduler.

Test data and expected values are defined in tests/test_config.py.
"""

import logging
import threading
import time
from unittest.mock import patch

import pytest

from hackswipe.models import HistoryEntry, SessionSnapshot
from hackswipe.session import ManualScheduler, SessionStatus, SwipeSession, TimerScheduler
from hackswipe.storage import MockSessionStore

from tests.test_config import CONFIG

IDENTITY = CONFIG["identity"]
EXIT = CONFIG["exit_delay"]
SAVE = CONFIG["save_delay"]


@pytest.fixture
def signed_in(make_session):
    session = make_session()
    session.login(IDENTITY)
    return session


class TestExitDelay:
    """Tests for the delay between a swipe and the next card."""
    
    def test_advance_waits_for_exit_delay(self, make_session, scheduler):
        session = make_session()
        first = session.current_project
        
        assert session.swipe("like") is True
        assert session.current_index == 0
        assert session.history == [HistoryEntry(first, True)]
        
        scheduler.advance(EXIT)
        
        assert session.current_index == 1
        assert session.current_project == session.queue[1]
    
    def test_second_swipe_during_delay_discarded(self, make_session, scheduler):
        session = make_session()
        
        assert session.swipe("like") is True
        assert session.swipe("pass") is False
        scheduler.advance(EXIT)
        
        assert session.current_index == 1
        assert len(session.liked) == 1
        assert session.passed == []
    
    def test_zero_exit_delay_advances_immediately(self, make_session):
        session = make_session(exit_delay=0)
        session.swipe("pass")
        session.swipe("pass")
        assert session.current_index == 2
        assert len(session.passed) == 2
    
    def test_unknown_direction_raises(self, make_session):
        session = make_session()
        with pytest.raises(ValueError):
            session.swipe("up")
        assert session.history == []
    
    def test_swipes_after_exhaustion_ignored(self, make_session, corpus):
        session = make_session(exit_delay=0)
        for _ in corpus:
            assert session.swipe("like") is True
        
        assert session.status is SessionStatus.EXHAUSTED
        assert session.swipe("like") is False
        assert len(session.history) == len(corpus)


class TestDebounce:
    """Tests for coalescing saves."""
    
    def test_anonymous_session_never_touches_store(self, make_session, mock_store, scheduler):
        session = make_session()
        session.swipe("like")
        session.reset()
        session.swipe("pass")
        scheduler.run_all()
        
        assert mock_store.load_calls == 0
        assert mock_store.save_calls == 0
    
    def test_save_waits_for_quiet_period(self, signed_in, mock_store, scheduler):
        signed_in.swipe("like")
        
        scheduler.advance(EXIT)
        assert signed_in.save_pending
        scheduler.advance(SAVE / 2)
        assert mock_store.save_calls == 0
        
        scheduler.advance(SAVE)
        assert mock_store.save_calls == 1
        assert mock_store.get(IDENTITY).current_index == 1
        assert not signed_in.save_pending
    
    def test_burst_of_swipes_saves_once(self, signed_in, mock_store, scheduler):
        for direction in ["like", "pass", "like", "pass"]:
            signed_in.swipe(direction)
            scheduler.advance(EXIT)
        
        assert mock_store.save_calls == 0
        scheduler.advance(SAVE * 2)
        
        assert mock_store.save_calls == 1
        saved = mock_store.get(IDENTITY)
        assert saved.current_index == 4
        assert len(saved.history) == 4
        assert saved == signed_in.snapshot()
    
    def test_flush_runs_pending_save(self, signed_in, mock_store):
        signed_in.swipe("like")
        
        result = signed_in.flush()
        
        assert result.success
        assert mock_store.save_calls == 1
        assert len(mock_store.get(IDENTITY).history) == 1
        assert not signed_in.save_pending
    
    def test_flush_without_pending_save(self, signed_in, mock_store):
        assert signed_in.flush() is None
        assert mock_store.save_calls == 0


class TestSaveFailures:
    """Storage errors are logged and never escape the controller."""
    
    def test_failed_save_logged_and_retried(self, signed_in, mock_store, scheduler, caplog):
        mock_store.fail_saves = True
        
        with caplog.at_level(logging.WARNING, logger="hackswipe.session.controller"):
            signed_in.swipe("like")
            scheduler.run_all()
        
        assert signed_in.last_save.success is False
        assert "Failed to save session" in caplog.text
        assert mock_store.get(IDENTITY) is None
        
        mock_store.fail_saves = False
        signed_in.swipe("pass")
        scheduler.run_all()
        
        assert signed_in.last_save.success is True
        assert mock_store.get(IDENTITY).current_index == 2
    
    def test_store_raising_on_save(self, signed_in, mock_store, scheduler):
        with patch.object(mock_store, "save", side_effect=RuntimeError("database down")):
            signed_in.swipe("like")
            scheduler.run_all()
        
        assert signed_in.last_save.success is False
        assert signed_in.last_save.error == "database down"
        assert signed_in.is_saving is False
        assert signed_in.current_index == 1


class TestLogin:
    """Tests for restoring a signed-in session."""
    
    def test_fresh_login(self, make_session, mock_store, scheduler):
        session = make_session()
        
        assert session.login(IDENTITY) is False
        assert session.identity == IDENTITY
        assert session.status is SessionStatus.ACTIVE
        assert mock_store.load_calls == 1
        assert scheduler.pending == 0
    
    def test_login_restores_saved_progress(self, make_session, mock_store, corpus, scheduler):
        mock_store.save(IDENTITY, SessionSnapshot(
            liked=[corpus[0]],
            passed=[corpus[1]],
            history=[HistoryEntry(corpus[0], True), HistoryEntry(corpus[1], False)],
            current_index=2,
        ))
        session = make_session()
        
        assert session.login(IDENTITY) is True
        
        assert session.current_index == 2
        assert session.liked == [corpus[0]]
        assert session.passed == [corpus[1]]
        assert session.current_project == session.queue[2]
        # Restoring is not a change worth saving
        assert scheduler.pending == 0
    
    def test_login_replaces_anonymous_progress(self, make_session, mock_store):
        session = make_session(exit_delay=0)
        session.swipe("like")
        
        session.login(IDENTITY)
        
        assert session.history == []
        assert session.current_index == 0
    
    def test_restored_index_past_end_is_exhausted(self, make_session, mock_store, corpus):
        mock_store.save(IDENTITY, SessionSnapshot(current_index=len(corpus) + 3))
        session = make_session()
        
        session.login(IDENTITY)
        
        assert session.status is SessionStatus.EXHAUSTED
        assert session.current_project is None
        assert session.stats()["remaining"] == 0
    
    def test_load_failure_starts_fresh(self, make_session, mock_store):
        mock_store.fail_loads = True
        session = make_session()
        
        assert session.login(IDENTITY) is False
        assert session.status is SessionStatus.ACTIVE
        assert session.current_index == 0
    
    def test_store_raising_on_load_starts_fresh(self, make_session, mock_store):
        session = make_session()
        with patch.object(mock_store, "load", side_effect=RuntimeError("boom")):
            assert session.login(IDENTITY) is False
        assert session.status is SessionStatus.ACTIVE
    
    def test_swipe_ignored_while_loading(self, make_session, mock_store):
        session = make_session()
        seen = []
        
        def load_and_swipe(identity):
            seen.append(session.status)
            seen.append(session.swipe("like"))
            return None
        
        with patch.object(mock_store, "load", side_effect=load_and_swipe):
            session.login(IDENTITY)
        
        assert seen == [SessionStatus.LOADING, False]
        assert session.history == []
        assert session.status is SessionStatus.ACTIVE
    
    def test_logout_during_load_drops_result(self, make_session, mock_store, corpus):
        mock_store.save(IDENTITY, SessionSnapshot(current_index=3))
        session = make_session()
        real_load = mock_store.load
        
        def load_then_logout(identity):
            snapshot = real_load(identity)
            session.logout()
            return snapshot
        
        with patch.object(mock_store, "load", side_effect=load_then_logout):
            assert session.login(IDENTITY) is False
        
        assert session.identity is None
        assert session.current_index == 0
        assert session.status is SessionStatus.ACTIVE
    
    def test_no_store_login_is_local(self, make_session, scheduler):
        session = make_session(store=None)
        assert session.login(IDENTITY) is False
        session.swipe("like")
        scheduler.run_all()
        assert session.current_index == 1
    
    def test_no_store_login_during_exit_delay(self, make_session, scheduler):
        session = make_session(store=None)
        session.swipe("like")
        
        session.login(IDENTITY)
        scheduler.run_all()
        
        assert session.current_index == 1
        assert session.swipe("pass") is True
        scheduler.run_all()
        assert session.current_index == len(session.history) == 2


class TestLogoutAndReset:
    """Tests for logout and reset."""
    
    def test_logout_cancels_pending_save(self, signed_in, mock_store, scheduler):
        signed_in.swipe("like")
        scheduler.advance(EXIT)
        
        signed_in.logout()
        scheduler.run_all()
        
        assert mock_store.save_calls == 0
        assert signed_in.identity is None
    
    def test_logout_resets_to_empty_and_keeps_remote(self, signed_in, mock_store, scheduler, corpus):
        signed_in.swipe("like")
        scheduler.run_all()
        stored = mock_store.get(IDENTITY)
        
        signed_in.swipe("pass")
        signed_in.logout()
        scheduler.run_all()
        
        assert signed_in.current_index == 0
        assert signed_in.liked == signed_in.history == []
        assert signed_in.status is SessionStatus.ACTIVE
        assert mock_store.get(IDENTITY) == stored
        assert mock_store.count() == 1
    
    def test_logout_cancels_pending_advance(self, make_session, scheduler):
        session = make_session()
        session.swipe("like")
        session.logout()
        scheduler.run_all()
        assert session.current_index == 0
    
    def test_relogin_restores_after_logout(self, signed_in, mock_store, scheduler):
        for direction in ["like", "pass", "like"]:
            signed_in.swipe(direction)
            scheduler.advance(EXIT)
        scheduler.run_all()
        signed_in.logout()
        
        assert signed_in.login(IDENTITY) is True
        assert signed_in.current_index == 3
        assert len(signed_in.liked) == 2
    
    def test_reset_saves_immediately(self, signed_in, mock_store, scheduler):
        signed_in.swipe("like")
        scheduler.run_all()
        
        result = signed_in.reset()
        
        assert result.success
        assert mock_store.save_calls == 2
        assert mock_store.get(IDENTITY).is_empty
        assert scheduler.pending == 0
        assert signed_in.current_index == 0
    
    def test_reset_during_exit_delay(self, signed_in, scheduler):
        signed_in.swipe("like")
        signed_in.reset()
        scheduler.run_all()
        assert signed_in.current_index == 0
        assert signed_in.history == []
    
    def test_reset_is_deterministic(self, make_session, corpus):
        session = make_session(exit_delay=0)
        before = session.queue
        session.swipe("like")
        assert session.reset() is None
        assert session.queue == before
    
    def test_history_entry_lookup(self, make_session):
        session = make_session(exit_delay=0)
        first = session.current_project
        session.swipe("like")
        assert session.history_entry(0) == HistoryEntry(first, True)
        assert session.history_entry(1) is None
        assert session.history_entry(-1) is None


class TestLateTimers:
    """A timer that fires just as it is cancelled must not act."""
    
    @pytest.fixture
    def callbacks(self, scheduler):
        fired = []
        real_call_later = scheduler.call_later
        
        def record(delay, callback):
            fired.append(callback)
            return real_call_later(delay, callback)
        
        with patch.object(scheduler, "call_later", side_effect=record):
            yield fired
    
    def test_cancelled_advance_does_not_move_next_card(self, make_session, scheduler, callbacks):
        session = make_session()
        session.swipe("like")
        session.reset()
        session.swipe("pass")
        
        # The first swipe's timer runs after reset() already cancelled it
        callbacks[0]()
        assert session.current_index == 0
        
        scheduler.advance(EXIT)
        assert session.current_index == 1
        assert session.liked == []
        assert session.passed == [session.queue[0]]
    
    def test_cancelled_save_does_not_drop_newer_timer(self, signed_in, mock_store, scheduler, callbacks):
        signed_in.swipe("like")
        scheduler.advance(EXIT)
        
        # callbacks: [advance, first debounce, debounce restarted by the advance]
        callbacks[1]()
        assert mock_store.save_calls == 0
        assert signed_in.save_pending
        
        scheduler.run_all()
        assert mock_store.save_calls == 1
        assert mock_store.get(IDENTITY).current_index == 1


class _SlowFirstSaveStore(MockSessionStore):
    """Blocks the first save until released."""
    
    def __init__(self):
        super().__init__()
        self.entered = threading.Event()
        self.release = threading.Event()
        self._first = True
    
    def save(self, identity, snapshot):
        if self._first:
            self._first = False
            self.entered.set()
            self.release.wait(5)
        return super().save(identity, snapshot)


def test_reset_not_overwritten_by_slow_save(corpus):
    """A debounced save still in flight cannot land after reset's save."""
    store = _SlowFirstSaveStore()
    session = SwipeSession(corpus, store=store, scheduler=ManualScheduler(), exit_delay=0)
    session.login(IDENTITY)
    session.swipe("like")
    
    flusher = threading.Thread(target=session.flush)
    flusher.start()
    assert store.entered.wait(5)
    
    resetter = threading.Thread(target=session.reset)
    resetter.start()
    store.release.set()
    flusher.join(5)
    resetter.join(5)
    
    assert store.get(IDENTITY).is_empty
    assert store.save_calls == 2


def test_timer_scheduler_end_to_end(corpus):
    """Real timers: the swipe advances and is eventually saved."""
    store = MockSessionStore()
    session = SwipeSession(
        corpus,
        store=store,
        scheduler=TimerScheduler(),
        exit_delay=0.01,
        save_delay=0.02,
    )
    session.login(IDENTITY)
    session.swipe("like")
    
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        saved = store.get(IDENTITY)
        if saved is not None and saved.current_index == 1:
            break
        time.sleep(0.01)
    
    session.close()
    assert session.current_index == 1
    assert store.get(IDENTITY).current_index == 1
