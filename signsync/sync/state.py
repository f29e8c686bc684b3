# SignSync Sync State
# Persisted record of the last reconciled inventory

import logging
from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

import yaml

from signsync.utils.paths import atomic_stream_write

log = logging.getLogger(__name__)


@dataclass
class SyncState:
    """
    State carried from one reconciliation cycle to the next.

    reconciled_paths is the inventory published at the end of the last
    successful cycle; only these paths may ever be deleted, and only from
    the bucket, media root and prefix recorded alongside them.
    """

    version: str = "1.0"
    bucket: Optional[str] = None
    media_root: Optional[str] = None
    prefix: Optional[str] = None
    last_sync: Optional[str] = None  # ISO format datetime
    last_downloaded: int = 0
    last_deleted: int = 0
    last_error: Optional[str] = None
    reconciled_paths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "version": self.version,
            "bucket": self.bucket,
            "media_root": self.media_root,
            "prefix": self.prefix,
            "last_sync": self.last_sync,
            "last_downloaded": self.last_downloaded,
            "last_deleted": self.last_deleted,
            "last_error": self.last_error,
            "reconciled_paths": sorted(self.reconciled_paths),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncState":
        """Create from dictionary."""
        return cls(
            version=data.get("version", "1.0"),
            bucket=data.get("bucket"),
            media_root=data.get("media_root"),
            prefix=data.get("prefix"),
            last_sync=data.get("last_sync"),
            last_downloaded=data.get("last_downloaded", 0) or 0,
            last_deleted=data.get("last_deleted", 0) or 0,
            last_error=data.get("last_error"),
            reconciled_paths=_path_list(data.get("reconciled_paths")),
        )


class StateManager:
    """
    Manages sync state persistence.

    Handles loading, saving, and updating sync state. A missing or corrupt
    state file yields an empty state, which makes the next cycle delete
    nothing.
    """

    def __init__(self, state_path: Optional[Path] = None):
        """
        Initialize state manager.

        Args:
            state_path: Path to state file. Defaults to ~/.config/signsync/.sync_state.yaml
        """
        if state_path is None:
            state_path = Path.home() / ".config" / "signsync" / ".sync_state.yaml"
        self.state_path = state_path
        self._state: Optional[SyncState] = None

    @property
    def state(self) -> SyncState:
        """Get current state, loading if necessary."""
        if self._state is None:
            self._state = self.load()
        return self._state

    def load(self) -> SyncState:
        """Load state from file."""
        if not self.state_path.exists():
            return SyncState()

        try:
            with open(self.state_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            log.warning("Ignoring unreadable sync state %s: %s", self.state_path, e)
            return SyncState()

        if not isinstance(data, dict):
            return SyncState()
        return SyncState.from_dict(data)

    def save(self) -> None:
        """Save state to file."""
        if self._state is None:
            return

        content = yaml.dump(self._state.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True)
        # Write as YAML, atomically
        atomic_stream_write(self.state_path, BytesIO(content.encode("utf-8")))

    def previous_paths(
        self,
        bucket: Optional[str] = None,
        *,
        media_root: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> frozenset[str]:
        """
        Relative paths of the last reconciled inventory.

        State recorded for a different bucket, media root or key prefix is
        not trusted. A state file that does not name its media root or
        prefix is treated as foreign when the caller names one.

        Args:
            bucket: Bucket about to be reconciled.
            media_root: Resolved media root about to be reconciled.
            prefix: Key prefix about to be reconciled.
        """
        state = self.state
        if bucket is not None and state.bucket not in (None, bucket):
            log.warning("Sync state belongs to bucket %r, not %r; ignoring it", state.bucket, bucket)
            return frozenset()
        if media_root is not None and state.media_root != media_root:
            if state.reconciled_paths:
                log.warning("Sync state belongs to media root %r, not %r; ignoring it", state.media_root, media_root)
            return frozenset()
        if prefix is not None and state.prefix != prefix:
            if state.reconciled_paths:
                log.warning("Sync state belongs to prefix %r, not %r; ignoring it", state.prefix, prefix)
            return frozenset()
        return frozenset(state.reconciled_paths)

    def record_cycle(
        self,
        *,
        bucket: Optional[str],
        reconciled_paths: Optional[list[str]],
        downloaded: int,
        deleted: int,
        error: Optional[str] = None,
        media_root: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> SyncState:
        """
        Record the outcome of a cycle and save.

        Args:
            bucket: Bucket the cycle reconciled against.
            reconciled_paths: Published inventory paths, or None to keep the previous ones.
            downloaded: Number of successful downloads.
            deleted: Number of successful deletions.
            error: Optional error summary.
            media_root: Resolved media root the cycle wrote to.
            prefix: Key prefix the cycle reconciled.
        """
        state = self.state
        if reconciled_paths is None and (state.bucket, state.media_root, state.prefix) != (bucket, media_root, prefix):
            # Paths recorded for another target never carry over
            reconciled_paths = []

        state.bucket = bucket
        state.media_root = media_root
        state.prefix = prefix
        state.last_sync = datetime.now().isoformat()
        state.last_downloaded = downloaded
        state.last_deleted = deleted
        state.last_error = error
        if reconciled_paths is not None:
            state.reconciled_paths = list(reconciled_paths)
        self.save()
        return state

    def reset(self) -> None:
        """Reset state to empty."""
        self._state = SyncState()
        self.save()


def _path_list(value: Any) -> list[str]:
    """Relative paths from a loaded state file; anything but a list is empty."""
    if not isinstance(value, list):
        return []
    return [str(p) for p in value]
