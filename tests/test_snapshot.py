# SignSync Snapshot Tests
# Tests for the published inventory holder

import threading

from signsync.sync.item import MediaEntry
from signsync.sync.snapshot import SnapshotStore


def _entries(*names: str) -> list[MediaEntry]:
    return [MediaEntry(name=n, relative_path=n, absolute_path=f"/media/{n}", url=f"/media/{n}") for n in names]


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_starts_empty(self):
        store = SnapshotStore()
        assert store.get() == ()
        assert len(store) == 0
        assert store.version == 0

    def test_initial_entries(self):
        store = SnapshotStore(_entries("a.mp4"))
        assert [e.name for e in store.get()] == ["a.mp4"]

    def test_publish_replaces(self):
        store = SnapshotStore(_entries("a.mp4", "b.mp4"))
        published = store.publish(_entries("b.mp4"))
        assert store.get() == published
        assert [e.name for e in store.get()] == ["b.mp4"]
        assert store.version == 1

    def test_publish_if_current(self):
        store = SnapshotStore()
        version = store.version
        assert store.publish_if_current(_entries("a.mp4"), version) is True
        assert [e.name for e in store.get()] == ["a.mp4"]

    def test_publish_if_current_rejects_stale(self):
        store = SnapshotStore()
        version = store.version
        store.publish(_entries("b.mp4"))
        assert store.publish_if_current(_entries("a.mp4"), version) is False
        assert [e.name for e in store.get()] == ["b.mp4"]
        assert store.version == 1

    def test_snapshot_is_immutable(self):
        source = _entries("a.mp4")
        store = SnapshotStore()
        store.publish(source)
        source.append(_entries("z.mp4")[0])
        assert len(store.get()) == 1
        assert isinstance(store.get(), tuple)

    def test_reader_keeps_old_snapshot(self):
        store = SnapshotStore(_entries("a.mp4", "b.mp4"))
        held = store.get()
        store.publish(_entries("c.mp4"))
        assert [e.name for e in held] == ["a.mp4", "b.mp4"]

    def test_concurrent_readers_see_whole_lists(self):
        first = tuple(_entries(*(f"a{i:03}.mp4" for i in range(50))))
        second = tuple(_entries(*(f"b{i:03}.mp4" for i in range(30))))
        store = SnapshotStore(first)
        stop = threading.Event()
        torn: list[tuple] = []

        def reader():
            while not stop.is_set():
                snapshot = store.get()
                if snapshot not in (first, second):
                    torn.append(snapshot)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(2000):
            store.publish(second if i % 2 == 0 else first)
        stop.set()
        for t in threads:
            t.join()

        assert torn == []
        assert store.version == 2000
