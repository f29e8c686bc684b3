# SignSync Fetcher
# Materializes one remote object into the local media tree

import logging
from pathlib import Path

from signsync.errors import FetchError, SignSyncError
from signsync.storage.base import RemoteStore
from signsync.utils.paths import atomic_stream_write

log = logging.getLogger(__name__)


def fetch_object(remote: RemoteStore, key: str, dest: Path) -> int:
    """
    Download a remote object to dest without ever exposing a partial file.

    The body is streamed into a temporary file next to dest and renamed into
    place once complete; a failed transfer leaves dest untouched.

    Args:
        remote: Store to read from.
        key: Object key.
        dest: Final local path.

    Returns:
        Number of bytes written.

    Raises:
        FetchError: If the object could not be read or written.
    """
    try:
        with remote.open_object(key) as body:
            size = atomic_stream_write(dest, body)
    except FetchError:
        raise
    except SignSyncError as e:
        raise FetchError(key, str(e)) from e
    except OSError as e:
        raise FetchError(key, f"cannot write {dest}: {e}") from e
    except Exception as e:
        # Transport errors from the stream surface here as library-specific types
        raise FetchError(key, f"{type(e).__name__}: {e}") from e

    log.debug("Fetched %s -> %s (%d bytes)", key, dest, size)
    return size
