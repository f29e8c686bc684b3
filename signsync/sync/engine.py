# SignSync Sync Engine
# Reconciliation cycle and local inventory publishing

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from signsync.config.schema import SignSyncConfig
from signsync.errors import ConfigError, FilesystemError, ListingError, ScanError
from signsync.storage.base import RemoteStore
from signsync.sync.actions import ActionResult, ActionType, ReconciliationPlan, determine_plan, execute_action
from signsync.sync.item import MediaEntry, ScanResult, scan_media_directory
from signsync.sync.snapshot import SnapshotStore
from signsync.sync.state import StateManager
from signsync.utils.paths import ensure_dir, remove_partial_files

log = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of one reconciliation cycle."""

    success: bool = True
    dry_run: bool = False
    plan: Optional[ReconciliationPlan] = None
    downloaded: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    unchanged: int = 0
    failed: dict[str, str] = field(default_factory=dict)
    results: list[ActionResult] = field(default_factory=list)
    published: bool = False
    inventory_count: int = 0
    duration: float = 0.0

    @property
    def total_synced(self) -> int:
        return len(self.downloaded) + len(self.deleted)

    @property
    def errors(self) -> int:
        return len(self.failed)

    @property
    def has_changes(self) -> bool:
        return self.total_synced > 0


class SyncEngine:
    """
    Main synchronization engine.

    Owns the snapshot store and drives reconciliation cycles against the
    remote store. Cycles are serialized; local rescans may run concurrently
    with them and with each other, and only ever publish complete lists.
    """

    def __init__(
        self,
        config: SignSyncConfig,
        remote: Optional[RemoteStore] = None,
        *,
        snapshot_store: Optional[SnapshotStore] = None,
        state_manager: Optional[StateManager] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: SignSync configuration.
            remote: Remote store, or None when remote sync is disabled.
            snapshot_store: Optional snapshot store (creates new one if not provided).
            state_manager: Optional state manager (creates new one if not provided).
        """
        self.config = config
        self.root = config.media_root
        self.remote = remote
        self.store = snapshot_store or SnapshotStore()
        self.state_manager = state_manager or StateManager(config.state_path)
        self._cycle_lock = threading.Lock()

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    @property
    def state_root(self) -> str:
        """Absolute media root as recorded in the sync state."""
        return str(self.root.expanduser().resolve())

    def prepare(self) -> list[Path]:
        """
        Make the media root usable.

        Creates the root and removes temp files left by interrupted
        downloads.

        Returns:
            List of removed temp files.

        Raises:
            FilesystemError: If the media root cannot be created.
        """
        try:
            ensure_dir(self.root)
        except OSError as e:
            raise FilesystemError(str(self.root), f"cannot create media directory: {e}") from e

        try:
            removed = remove_partial_files(self.root)
        except OSError as e:
            log.warning("Could not clean interrupted downloads in %s: %s", self.root, e)
            return []

        for path in removed:
            log.info("Removed interrupted download: %s", path)
        return removed

    def snapshot(self) -> tuple[MediaEntry, ...]:
        """Return the currently published inventory without blocking on scans or cycles."""
        return self.store.get()

    def scan(self) -> ScanResult:
        """Walk the media root without publishing."""
        media = self.config.media
        return scan_media_directory(self.root, media.extensions, media.url_prefix)

    def rescan_local(self, *, strict: bool = False) -> tuple[MediaEntry, ...]:
        """
        Walk the media root and publish the result.

        The result is dropped if another scan or cycle published while this
        walk was running, so a slow rescan never replaces a newer inventory.

        Args:
            strict: Raise ScanError instead of returning the retained
                inventory when the root cannot be walked.

        Returns:
            The inventory that is published after the call.
        """
        version = self.store.version
        result = self.scan()
        if self._publish(result, since=version):
            return result.entries
        if strict and not result.complete:
            raise ScanError(str(self.root), "; ".join(result.errors) or "scan incomplete")
        return self.store.get()

    def plan(self) -> ReconciliationPlan:
        """
        List the remote store and compute the reconciliation plan.

        Raises:
            ConfigError: If remote sync is not configured.
            ListingError: If the remote listing fails.
        """
        remote = self._require_remote()
        remote_keys = remote.list_keys()
        log.info("Remote store lists %d objects", len(remote_keys))
        previous = self.state_manager.previous_paths(
            remote.bucket,
            media_root=self.state_root,
            prefix=self.config.storage.prefix,
        )
        return determine_plan(remote_keys, previous, self.root, self.config.storage.prefix)

    def sync_now(self, *, dry_run: bool = False) -> SyncResult:
        """
        Run one reconciliation cycle synchronously.

        Downloads are all attempted before any deletion. Per-item failures
        are logged and collected in the result; only a listing failure
        aborts the cycle, leaving local files, published inventory and
        sync state untouched.

        Args:
            dry_run: Compute the plan without applying it.

        Returns:
            SyncResult with details of what was done.

        Raises:
            ConfigError: If remote sync is not configured.
            ListingError: If the remote listing fails.
        """
        remote = self._require_remote()

        with self._cycle_lock:
            started = time.monotonic()
            log.info("Starting sync from %s...", remote.bucket)

            try:
                plan = self.plan()
            except ListingError as e:
                log.error("Failed to list remote objects: %s", e)
                raise

            result = SyncResult(dry_run=dry_run, plan=plan, unchanged=len(plan.unchanged))
            if dry_run:
                result.duration = time.monotonic() - started
                return result

            if plan.to_delete:
                log.info("%d files were deleted remotely and will be removed locally", len(plan.to_delete))

            for action in plan.actions:
                action_result = execute_action(action, remote)
                result.results.append(action_result)
                if not action_result.success:
                    result.failed[action.relative_path] = action_result.error or "unknown error"
                    result.success = False
                elif action.action_type == ActionType.DOWNLOAD:
                    result.downloaded.append(action.relative_path)
                elif action.action_type == ActionType.DELETE:
                    result.deleted.append(action.relative_path)

            scan_result = self.scan()
            result.published = self._publish(scan_result)
            result.inventory_count = len(self.store.get())

            reconciled = [entry.relative_path for entry in scan_result.entries] if result.published else None
            self._record_cycle(remote, result, reconciled)

            result.duration = time.monotonic() - started
            if result.has_changes:
                log.info(
                    "Sync completed: %d downloaded, %d deleted, %d failed",
                    len(result.downloaded),
                    len(result.deleted),
                    result.errors,
                )
            else:
                log.info("Sync completed: no updates needed")
            return result

    def _publish(self, result: ScanResult, *, since: Optional[int] = None) -> bool:
        if not (result.complete or self.config.media.publish_partial_scans):
            log.warning("Keeping previous inventory of %d files after incomplete scan", len(self.store.get()))
            return False

        if since is None:
            self.store.publish(result.entries)
            return True

        if self.store.publish_if_current(result.entries, since):
            return True
        log.debug("Discarding local scan, a newer inventory was published during the walk")
        return False

    def _record_cycle(self, remote: RemoteStore, result: SyncResult, reconciled: Optional[list[str]]) -> None:
        error = None
        if result.failed:
            error = f"{len(result.failed)} item(s) failed"
        try:
            self.state_manager.record_cycle(
                bucket=remote.bucket,
                media_root=self.state_root,
                prefix=self.config.storage.prefix,
                reconciled_paths=reconciled,
                downloaded=len(result.downloaded),
                deleted=len(result.deleted),
                error=error,
            )
        except OSError as e:
            log.error("Failed to save sync state %s: %s", self.state_manager.state_path, e)

    def _require_remote(self) -> RemoteStore:
        if self.remote is None:
            raise ConfigError("Remote sync is not configured (set storage.bucket or S3_BUCKET)")
        return self.remote
