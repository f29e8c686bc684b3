# SignSync Scheduler Tests
# Tests for the background reconciliation loop

import threading
import time
from pathlib import Path
from unittest.mock import MagicMock

from signsync.config.schema import SignSyncConfig
from signsync.errors import ListingError
from signsync.sync.engine import SyncEngine
from signsync.sync.scheduler import SchedulerState, SyncScheduler
from signsync.sync.state import StateManager


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class TestRunCycle:
    """Tests for SyncScheduler.run_cycle."""

    def test_success(self, config: SignSyncConfig, state_manager: StateManager, make_remote, media_root: Path):
        engine = SyncEngine(config, make_remote({"a.mp4": b"a"}), state_manager=state_manager)
        scheduler = SyncScheduler(engine, 60)

        result = scheduler.run_cycle()
        assert result is not None
        assert result.downloaded == ["a.mp4"]
        assert scheduler.cycles == 1
        assert scheduler.last_error is None
        assert scheduler.state == SchedulerState.IDLE

    def test_listing_error_is_not_raised(self, config: SignSyncConfig, state_manager: StateManager, make_remote):
        remote = make_remote({"a.mp4": b"a"})
        remote.fail_listing = True
        engine = SyncEngine(config, remote, state_manager=state_manager)
        scheduler = SyncScheduler(engine, 60)

        assert scheduler.run_cycle() is None
        assert isinstance(scheduler.last_error, ListingError)
        assert scheduler.cycles == 1

    def test_unexpected_error_is_not_raised(self):
        engine = MagicMock()
        engine.sync_now.side_effect = RuntimeError("boom")
        scheduler = SyncScheduler(engine, 60)

        assert scheduler.run_cycle() is None
        assert isinstance(scheduler.last_error, RuntimeError)

    def test_state_cycling_during_cycle(self):
        seen = []
        scheduler = None

        def sync_now():
            seen.append(scheduler.state)
            return MagicMock()

        engine = MagicMock()
        engine.sync_now.side_effect = sync_now
        scheduler = SyncScheduler(engine, 60)
        scheduler.run_cycle()

        assert seen == [SchedulerState.CYCLING]
        assert scheduler.state == SchedulerState.IDLE


class TestLoop:
    """Tests for the background thread."""

    def test_first_cycle_runs_at_start(self, config: SignSyncConfig, state_manager: StateManager, make_remote):
        engine = SyncEngine(config, make_remote({"a.mp4": b"a"}), state_manager=state_manager)
        scheduler = SyncScheduler(engine, 3600)
        scheduler.start()
        try:
            assert scheduler.wait_for_first_cycle(timeout=5) is True
            assert [e.name for e in engine.snapshot()] == ["a.mp4"]
        finally:
            scheduler.stop(timeout=5)
        assert scheduler.running is False
        assert scheduler.cycles == 1

    def test_runs_every_interval(self):
        engine = MagicMock()
        scheduler = SyncScheduler(engine, 0.02)
        scheduler.start()
        try:
            assert _wait_for(lambda: scheduler.cycles >= 3)
        finally:
            scheduler.stop(timeout=5)
        assert scheduler.running is False

    def test_listing_failures_retried(self, config: SignSyncConfig, state_manager: StateManager, make_remote):
        remote = make_remote({"a.mp4": b"a"})
        remote.fail_listing = True
        engine = SyncEngine(config, remote, state_manager=state_manager)
        scheduler = SyncScheduler(engine, 0.02)
        scheduler.start()
        try:
            assert scheduler.wait_for_first_cycle(timeout=5) is False
            assert engine.snapshot() == ()
            remote.fail_listing = False
            assert _wait_for(lambda: scheduler.last_result is not None)
        finally:
            scheduler.stop(timeout=5)
        assert [e.name for e in engine.snapshot()] == ["a.mp4"]

    def test_stop_waits_for_in_flight_cycle(self):
        started = threading.Event()
        release = threading.Event()
        finished = []

        def sync_now():
            started.set()
            release.wait(5)
            finished.append(True)
            return MagicMock()

        engine = MagicMock()
        engine.sync_now.side_effect = sync_now
        scheduler = SyncScheduler(engine, 3600)
        scheduler.start()
        assert started.wait(5)

        stopper = threading.Thread(target=scheduler.stop, kwargs={"timeout": 5})
        stopper.start()
        release.set()
        stopper.join()

        assert finished == [True]
        assert scheduler.running is False

    def test_start_twice_is_noop(self):
        engine = MagicMock()
        scheduler = SyncScheduler(engine, 3600)
        scheduler.start()
        try:
            thread = scheduler._thread
            scheduler.start()
            assert scheduler._thread is thread
        finally:
            scheduler.stop(timeout=5)
