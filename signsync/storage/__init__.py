"""Remote object store clients."""

from .base import RemoteStore
from .factory import create_remote_store

__all__ = ["RemoteStore", "create_remote_store"]
