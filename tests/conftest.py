# SignSync Test Fixtures
# Pytest fixtures for SignSync tests

import io
import tempfile
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import pytest
import yaml

from signsync.config.loader import ENV_OVERRIDES
from signsync.config.schema import SignSyncConfig
from signsync.errors import FetchError, ListingError
from signsync.storage.base import RemoteStore
from signsync.sync.state import StateManager


class BrokenStream(io.BytesIO):
    """Stream that fails after handing out its first chunk."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self._reads = 0

    def read(self, size=-1):
        self._reads += 1
        if self._reads > 1:
            raise ConnectionResetError("connection reset by peer")
        return super().read(min(size, 4) if size and size > 0 else 4)


class FakeRemoteStore(RemoteStore):
    """In-memory remote store with paged listings and injectable failures."""

    def __init__(self, objects: dict[str, bytes] | None = None, *, bucket: str = "test-bucket", page_size: int = 2):
        self.bucket = bucket
        self.objects = dict(objects or {})
        self.page_size = page_size
        self.fail_listing = False
        self.fail_after_pages: int | None = None
        self.fail_keys: set[str] = set()
        self.broken_keys: set[str] = set()
        self.list_calls = 0
        self.fetched: list[str] = []

    def iter_pages(self) -> Iterator[list[str]]:
        self.list_calls += 1
        if self.fail_listing:
            raise ListingError("listing unavailable")

        keys = sorted(self.objects)
        for number, start in enumerate(range(0, len(keys), self.page_size)):
            if self.fail_after_pages is not None and number >= self.fail_after_pages:
                raise ListingError("listing interrupted")
            yield keys[start : start + self.page_size]

    @contextmanager
    def open_object(self, key: str) -> Iterator[BinaryIO]:
        if key in self.fail_keys or key not in self.objects:
            raise FetchError(key, "object unavailable")
        self.fetched.append(key)
        if key in self.broken_keys:
            yield BrokenStream(self.objects[key])
        else:
            yield io.BytesIO(self.objects[key])


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory with a clean environment."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("SIGNSYNC_CONFIG", *ENV_OVERRIDES):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def media_root(temp_dir: Path) -> Path:
    """Create an empty media root."""
    root = temp_dir / "media"
    root.mkdir()
    return root


@pytest.fixture
def state_file(temp_dir: Path) -> Path:
    """Path of the sync state file (not created)."""
    return temp_dir / "state" / ".sync_state.yaml"


@pytest.fixture
def config(media_root: Path, state_file: Path) -> SignSyncConfig:
    """Configuration pointing at the temporary media root and state file."""
    return SignSyncConfig.model_validate(
        {
            "media": {"root": str(media_root)},
            "storage": {"bucket": "test-bucket"},
            "sync": {"interval_minutes": 1, "state_file": str(state_file)},
        }
    )


@pytest.fixture
def config_file(temp_home: Path, media_root: Path, state_file: Path) -> Path:
    """Create a configuration file in the default location."""
    config_dir = temp_home / ".config" / "signsync"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    data = {
        "media": {"root": str(media_root)},
        "sync": {"interval_minutes": 5, "state_file": str(state_file)},
    }
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False)

    return config_path


@pytest.fixture
def state_manager(state_file: Path) -> StateManager:
    return StateManager(state_file)


@pytest.fixture
def remote() -> FakeRemoteStore:
    """Empty in-memory bucket."""
    return FakeRemoteStore()


@pytest.fixture
def make_remote():
    """Factory for in-memory buckets with given objects."""

    def _make(objects: dict[str, bytes] | None = None, **kwargs) -> FakeRemoteStore:
        return FakeRemoteStore(objects, **kwargs)

    return _make
