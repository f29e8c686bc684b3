# SignSync Snapshot Store
# Lock-guarded holder of the currently published inventory

import threading
from collections.abc import Iterable

from signsync.sync.item import MediaEntry


class SnapshotStore:
    """
    Holds the published inventory as one immutable tuple.

    publish() swaps the whole tuple under a lock; get() hands out the
    current tuple. Since the tuple is never mutated, a reader keeps a
    complete old list or a complete new list, never a mix.
    """

    def __init__(self, entries: Iterable[MediaEntry] = ()):
        self._lock = threading.Lock()
        self._entries: tuple[MediaEntry, ...] = tuple(entries)
        self._version = 0

    def get(self) -> tuple[MediaEntry, ...]:
        """Return the current inventory."""
        with self._lock:
            return self._entries

    def publish(self, entries: Iterable[MediaEntry]) -> tuple[MediaEntry, ...]:
        """
        Replace the inventory wholesale.

        Args:
            entries: The new inventory, already sorted.

        Returns:
            The published tuple.
        """
        snapshot = tuple(entries)
        with self._lock:
            self._entries = snapshot
            self._version += 1
        return snapshot

    def publish_if_current(self, entries: Iterable[MediaEntry], version: int) -> bool:
        """
        Replace the inventory only if nothing was published since version.

        Args:
            entries: The new inventory, already sorted.
            version: Value of ``version`` read before entries were built.

        Returns:
            True if entries were published.
        """
        snapshot = tuple(entries)
        with self._lock:
            if self._version != version:
                return False
            self._entries = snapshot
            self._version += 1
        return True

    @property
    def version(self) -> int:
        """Number of publishes so far."""
        with self._lock:
            return self._version

    def __len__(self) -> int:
        return len(self.get())
