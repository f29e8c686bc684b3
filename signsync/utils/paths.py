# SignSync Path Utilities
# Safe file operations with atomic writes and key/path mapping

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO

PARTIAL_SUFFIX = ".part"
COPY_CHUNK_SIZE = 1024 * 1024
DEFAULT_FILE_MODE = 0o666

log = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_stream_write(path: Path, stream: BinaryIO, *, chunk_size: int = COPY_CHUNK_SIZE) -> int:
    """
    Atomically write a binary stream to file.

    Data goes to a hidden temporary file in the destination directory which
    is renamed over the final path only after the whole stream was copied
    and flushed to disk. The file gets the mode of the file it replaces, or
    0666 minus the umask for a new file, like a plain open() would.

    Args:
        path: Target file path.
        stream: Readable binary file-like object.
        chunk_size: Copy buffer size.

    Returns:
        Number of bytes written.
    """
    ensure_dir(path.parent)
    mode = _target_mode(path)

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=PARTIAL_SUFFIX)
    try:
        with os.fdopen(fd, "wb") as f:
            shutil.copyfileobj(stream, f, chunk_size)
            os.fchmod(f.fileno(), mode)
            f.flush()
            os.fsync(f.fileno())
            written = f.tell()
        # Atomic rename
        os.replace(temp_path, path)
    except BaseException:
        # Cleanup on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
    return written


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE & ~_current_umask()


def is_partial_file(path: Path) -> bool:
    """Check if path is a temporary file left by an interrupted atomic write."""
    return path.name.startswith(".") and path.name.endswith(PARTIAL_SUFFIX)


def remove_partial_files(directory: Path) -> list[Path]:
    """
    Remove temporary files left behind by interrupted downloads.

    A file that cannot be removed is logged and skipped.

    Args:
        directory: Root directory to clean recursively.

    Returns:
        List of removed paths.
    """
    removed: list[Path] = []
    if not directory.is_dir():
        return removed

    for path in directory.rglob(f".*{PARTIAL_SUFFIX}"):
        if not (path.is_file() and is_partial_file(path)):
            continue
        try:
            path.unlink()
        except OSError as e:
            log.warning("Could not remove interrupted download %s: %s", path, e)
            continue
        removed.append(path)
    return removed


def safe_delete(path: Path, *, missing_ok: bool = False) -> bool:
    """
    Safely delete a file.

    Args:
        path: Path to delete.
        missing_ok: If True, don't raise error if path doesn't exist.

    Returns:
        True if something was deleted, False if path didn't exist.

    Raises:
        FileNotFoundError: If path doesn't exist and missing_ok is False.
        IsADirectoryError: If path is a directory.
    """
    if not path.exists():
        if missing_ok:
            return False
        raise FileNotFoundError(f"Path does not exist: {path}")

    if path.is_dir():
        raise IsADirectoryError(f"Refusing to delete directory: {path}")

    path.unlink()
    return True


def key_to_relative_path(key: str, prefix: str = "") -> str | None:
    """
    Map a remote object key to a POSIX relative path under the media root.

    Args:
        key: Object key as returned by the store listing.
        prefix: Key prefix that is stripped before mapping.

    Returns:
        Relative path, or None if the key does not map to a file inside the
        root (directory markers, other prefixes, absolute or ``..`` paths).
    """
    if prefix:
        if not key.startswith(prefix):
            return None
        key = key[len(prefix) :]

    if not key or key.endswith("/"):
        return None

    # Leading "/" and "//" show up as empty parts
    if any(part in ("", ".", "..") for part in key.split("/")):
        return None

    return PurePosixPath(key).as_posix()


def relative_path_to_key(relative_path: str, prefix: str = "") -> str:
    """Inverse of key_to_relative_path."""
    return f"{prefix}{relative_path}"


def local_path_for(root: Path, relative_path: str) -> Path:
    """Resolve a POSIX relative path to a local path under root."""
    return root.joinpath(*PurePosixPath(relative_path).parts)
