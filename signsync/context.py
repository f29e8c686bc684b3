# SignSync Context
# Explicit wiring of configuration, remote store, engine and scheduler

from dataclasses import dataclass
from typing import Any, Optional

from signsync.config.schema import SignSyncConfig
from signsync.storage.base import RemoteStore
from signsync.storage.factory import create_remote_store
from signsync.sync.engine import SyncEngine, SyncResult
from signsync.sync.item import MediaEntry, inventory_payload
from signsync.sync.scheduler import SyncScheduler
from signsync.sync.state import StateManager


@dataclass
class SignageContext:
    """
    Everything a running signage node needs, built once at startup.

    The HTTP layer holds a reference to this object and reads through
    snapshot()/rescan_local()/sync_now(); nothing is kept in module globals.
    """

    config: SignSyncConfig
    engine: SyncEngine
    scheduler: Optional[SyncScheduler] = None

    @property
    def remote(self) -> Optional[RemoteStore]:
        return self.engine.remote

    def snapshot(self) -> tuple[MediaEntry, ...]:
        return self.engine.snapshot()

    def rescan_local(self) -> tuple[MediaEntry, ...]:
        return self.engine.rescan_local()

    def sync_now(self) -> SyncResult:
        return self.engine.sync_now()

    def media_payload(self, *, rescan: bool = True) -> dict[str, Any]:
        """Payload for the media API; rescans first, like the player endpoint does."""
        entries = self.rescan_local() if rescan else self.snapshot()
        return inventory_payload(entries)

    def start(self) -> None:
        """
        Prepare the media root, publish the initial inventory and start
        background sync when a remote store is configured.

        Raises:
            FilesystemError: If the media root cannot be created.
        """
        self.engine.prepare()
        self.engine.rescan_local()
        if self.scheduler is not None:
            self.scheduler.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        if self.scheduler is not None:
            self.scheduler.stop(timeout=timeout)


def build_context(
    config: SignSyncConfig,
    *,
    remote: Optional[RemoteStore] = None,
    state_manager: Optional[StateManager] = None,
) -> SignageContext:
    """
    Build a context from configuration.

    Args:
        config: Loaded configuration.
        remote: Explicit remote store; created from config.storage if omitted.
        state_manager: Explicit state manager; created from config.sync if omitted.

    Returns:
        SignageContext (not started).
    """
    if remote is None:
        remote = create_remote_store(config.storage)

    engine = SyncEngine(config, remote, state_manager=state_manager)
    scheduler = SyncScheduler(engine, config.sync.interval_seconds) if remote is not None else None
    return SignageContext(config=config, engine=engine, scheduler=scheduler)
