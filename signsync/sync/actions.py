# SignSync Sync Actions
# Reconciliation plan, action types and execution

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from signsync.errors import FetchError
from signsync.storage.base import RemoteStore
from signsync.sync.fetcher import fetch_object
from signsync.utils.paths import key_to_relative_path, local_path_for, relative_path_to_key, safe_delete

log = logging.getLogger(__name__)


class ActionType(str, Enum):
    """Types of sync actions."""

    # Remote key without a local file
    DOWNLOAD = "download"

    # File from the previous reconciled inventory no longer listed remotely
    DELETE = "delete"

    # Local file already present for the remote key
    UNCHANGED = "unchanged"


@dataclass
class SyncAction:
    """
    A single step of a reconciliation plan.

    Key and relative path always refer to the same object; local_path is
    the file under the media root.
    """

    action_type: ActionType
    relative_path: str
    key: str
    local_path: Path
    reason: str = ""

    @property
    def needs_action(self) -> bool:
        """Check if this action requires execution."""
        return self.action_type != ActionType.UNCHANGED

    @property
    def direction(self) -> str:
        """Get human-readable direction of action."""
        if self.action_type == ActionType.DOWNLOAD:
            return "remote → local"
        elif self.action_type == ActionType.DELETE:
            return "× local"
        return "—"


@dataclass
class ActionResult:
    """Result of executing an action."""

    action: SyncAction
    success: bool
    error: Optional[str] = None
    bytes_written: int = 0


@dataclass
class ReconciliationPlan:
    """
    Downloads and deletions for one cycle.

    Derived fresh from the remote listing and the previous reconciled
    inventory; discarded once applied.
    """

    to_download: frozenset[str] = frozenset()
    to_delete: frozenset[str] = frozenset()
    unchanged: frozenset[str] = frozenset()
    rejected_keys: frozenset[str] = frozenset()
    root: Path = field(default_factory=Path)
    prefix: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.to_download and not self.to_delete

    @property
    def actions(self) -> list[SyncAction]:
        """All downloads (sorted by key) followed by all deletions (sorted by path)."""
        actions: list[SyncAction] = []
        for key in sorted(self.to_download):
            rel = key_to_relative_path(key, self.prefix)
            actions.append(
                SyncAction(
                    action_type=ActionType.DOWNLOAD,
                    relative_path=rel,
                    key=key,
                    local_path=local_path_for(self.root, rel),
                    reason="New in remote store",
                )
            )
        for rel in sorted(self.to_delete):
            actions.append(
                SyncAction(
                    action_type=ActionType.DELETE,
                    relative_path=rel,
                    key=relative_path_to_key(rel, self.prefix),
                    local_path=local_path_for(self.root, rel),
                    reason="Removed from remote store",
                )
            )
        return actions


def determine_plan(
    remote_keys: Iterable[str],
    previous_paths: Iterable[str],
    root: Path,
    prefix: str = "",
) -> ReconciliationPlan:
    """
    Diff the remote listing against local state.

    A remote key is downloaded when no local file exists at its mapped path;
    an existing file is accepted as-is. Only paths from the previous
    reconciled inventory are deletion candidates, and only when their key is
    missing from the listing.

    Args:
        remote_keys: Complete remote listing.
        previous_paths: Relative paths of the last reconciled inventory.
        root: Media root directory.
        prefix: Key prefix stripped when mapping keys to paths.

    Returns:
        ReconciliationPlan.
    """
    to_download: set[str] = set()
    unchanged: set[str] = set()
    rejected: set[str] = set()
    remote_paths: set[str] = set()

    for key in remote_keys:
        rel = key_to_relative_path(key, prefix)
        if rel is None:
            if not key.endswith("/"):
                rejected.add(key)
                log.warning("Ignoring remote key outside the media root: %r", key)
            continue
        remote_paths.add(rel)
        if local_path_for(root, rel).exists():
            unchanged.add(key)
        else:
            to_download.add(key)

    to_delete = {rel for rel in previous_paths if rel not in remote_paths}

    return ReconciliationPlan(
        to_download=frozenset(to_download),
        to_delete=frozenset(to_delete),
        unchanged=frozenset(unchanged),
        rejected_keys=frozenset(rejected),
        root=root,
        prefix=prefix,
    )


def execute_action(action: SyncAction, remote: RemoteStore, *, dry_run: bool = False) -> ActionResult:
    """
    Execute a sync action.

    Failures are returned, never raised, so one bad key or path cannot stop
    the rest of the plan.

    Args:
        action: The action to execute.
        remote: Store used for downloads.
        dry_run: If True, don't actually perform the action.

    Returns:
        ActionResult with success status.
    """
    if not action.needs_action or dry_run:
        return ActionResult(action=action, success=True)

    if action.action_type == ActionType.DOWNLOAD:
        return _execute_download(action, remote)
    elif action.action_type == ActionType.DELETE:
        return _execute_delete(action)
    return ActionResult(action=action, success=False, error=f"Unknown action type: {action.action_type}")


def _execute_download(action: SyncAction, remote: RemoteStore) -> ActionResult:
    try:
        size = fetch_object(remote, action.key, action.local_path)
    except FetchError as e:
        log.error("Failed to download %s: %s", action.key, e)
        return ActionResult(action=action, success=False, error=str(e))

    log.info("Downloaded: %s", action.key)
    return ActionResult(action=action, success=True, bytes_written=size)


def _execute_delete(action: SyncAction) -> ActionResult:
    try:
        deleted = safe_delete(action.local_path, missing_ok=True)
    except OSError as e:
        log.error("Failed to delete %s: %s", action.local_path, e)
        return ActionResult(action=action, success=False, error=f"{action.local_path}: {e}")

    if deleted:
        log.info("Deleted: %s", action.relative_path)
    return ActionResult(action=action, success=True)
