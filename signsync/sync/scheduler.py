# SignSync Sync Scheduler
# Background thread running reconciliation cycles on a fixed interval

import logging
import threading
import time
from enum import Enum
from typing import Optional

from signsync.errors import ListingError
from signsync.sync.engine import SyncEngine, SyncResult

log = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    """Scheduler states."""

    IDLE = "idle"
    CYCLING = "cycling"


class SyncScheduler:
    """
    Runs one cycle at start, then one per interval until stopped.

    A failed cycle changes nothing; the scheduler simply waits for the next
    tick, so listing failures are retried indefinitely at the normal
    interval.
    """

    def __init__(self, engine: SyncEngine, interval: float):
        """
        Initialize scheduler.

        Args:
            engine: Engine whose sync_now() is driven.
            interval: Seconds between cycle starts.
        """
        self.engine = engine
        self.interval = interval

        self._state = SchedulerState.IDLE
        self._state_lock = threading.Lock()
        self._stop = threading.Event()
        self._first_cycle_done = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.cycles = 0
        self.last_result: Optional[SyncResult] = None
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> SchedulerState:
        with self._state_lock:
            return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background sync thread."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="signsync-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the background thread and wait for it to finish.

        An in-flight cycle is not cancelled; it runs to completion first.
        """
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    def wait_for_first_cycle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the first cycle finished.

        Returns:
            True if the first cycle succeeded, False on timeout or error.
        """
        if not self._first_cycle_done.wait(timeout=timeout):
            return False
        return self.last_error is None

    def run_cycle(self) -> Optional[SyncResult]:
        """Run one cycle in the calling thread, logging instead of raising."""
        self._set_state(SchedulerState.CYCLING)
        try:
            result = self.engine.sync_now()
        except ListingError as e:
            self.last_error = e
            log.warning("Sync cycle aborted, retrying in %.0fs: %s", self.interval, e)
            return None
        except Exception as e:
            self.last_error = e
            log.error("Sync cycle failed: %s", e, exc_info=True)
            return None
        finally:
            self.cycles += 1
            self._set_state(SchedulerState.IDLE)

        self.last_result = result
        self.last_error = None
        return result

    def _loop(self) -> None:
        log.info("Starting sync loop (every %.0fs)", self.interval)
        next_tick = time.monotonic()
        while not self._stop.is_set():
            self.run_cycle()
            self._first_cycle_done.set()

            # Fixed rate; ticks missed by a long cycle collapse into one
            next_tick = max(next_tick + self.interval, time.monotonic())
            self._stop.wait(next_tick - time.monotonic())
        log.info("Sync loop stopped")

    def _set_state(self, state: SchedulerState) -> None:
        with self._state_lock:
            self._state = state
