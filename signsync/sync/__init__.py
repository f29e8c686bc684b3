# SignSync Sync Module
# Reconciliation engine and components

from signsync.sync.actions import ActionResult, ActionType, ReconciliationPlan, SyncAction, determine_plan, execute_action
from signsync.sync.engine import SyncEngine, SyncResult
from signsync.sync.fetcher import fetch_object
from signsync.sync.item import MediaEntry, ScanResult, inventory_payload, scan_media_directory
from signsync.sync.scheduler import SchedulerState, SyncScheduler
from signsync.sync.snapshot import SnapshotStore
from signsync.sync.state import StateManager, SyncState

__all__ = [
    # Items
    "MediaEntry",
    "ScanResult",
    "scan_media_directory",
    "inventory_payload",
    # Actions
    "ActionType",
    "SyncAction",
    "ActionResult",
    "ReconciliationPlan",
    "determine_plan",
    "execute_action",
    "fetch_object",
    # Snapshot
    "SnapshotStore",
    # State
    "SyncState",
    "StateManager",
    # Engine
    "SyncEngine",
    "SyncResult",
    "SyncScheduler",
    "SchedulerState",
]
