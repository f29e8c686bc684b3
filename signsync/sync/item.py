# SignSync Media Items
# Media entry representation and local inventory scanning

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from signsync.config.schema import DEFAULT_EXTENSIONS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaEntry:
    """
    A playable media file under the media root.

    Identity is the POSIX relative path; two files with the same name in
    different subdirectories are distinct entries.
    """

    name: str
    relative_path: str
    absolute_path: str
    url: str

    def to_dict(self) -> dict[str, str]:
        """Wire representation consumed by the player."""
        return {"name": self.name, "path": self.absolute_path, "url": self.url}


@dataclass
class ScanResult:
    """Result of walking the media root."""

    entries: tuple[MediaEntry, ...] = ()
    complete: bool = True
    errors: list[str] = field(default_factory=list)

    @property
    def relative_paths(self) -> frozenset[str]:
        return frozenset(entry.relative_path for entry in self.entries)


def is_media_file(name: str, extensions: Iterable[str]) -> bool:
    """Check the (case-insensitive) extension against the supported set."""
    return os.path.splitext(name)[1].lower() in extensions


def scan_media_directory(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    url_prefix: str = "/media/",
) -> ScanResult:
    """
    Walk the media root and build the sorted inventory.

    Directory entries are visited depth-first in lexical order. Entries or
    subdirectories that cannot be read are skipped; if the root itself
    cannot be read the result is marked incomplete and holds whatever was
    collected.

    Args:
        root: Media root directory.
        extensions: Supported lower-case extensions, including the dot.
        url_prefix: Prefix for the serving URL.

    Returns:
        ScanResult with entries sorted ascending by file name.
    """
    supported = frozenset(ext.lower() for ext in extensions)
    result = ScanResult()
    found: list[MediaEntry] = []

    for path, rel_parts in _walk(root, (), result):
        if not is_media_file(path.name, supported):
            continue
        relative_path = "/".join(rel_parts)
        found.append(
            MediaEntry(
                name=path.name,
                relative_path=relative_path,
                absolute_path=str(path),
                url=url_prefix + relative_path,
            )
        )

    # sorted() is stable, so equal names keep traversal order
    result.entries = tuple(sorted(found, key=lambda entry: entry.name))

    if result.complete:
        log.info("Found %d media files", len(result.entries))
    else:
        log.warning("Partial scan of %s: %d media files collected", root, len(result.entries))
    return result


def _walk(directory: Path, rel_parts: tuple[str, ...], result: ScanResult) -> Iterator[tuple[Path, tuple[str, ...]]]:
    """Yield (file path, relative parts) for every non-directory entry."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        message = f"{directory}: {e.strerror or e}"
        result.errors.append(message)
        if not rel_parts:
            result.complete = False
            log.error("Error scanning media directory: %s", message)
        else:
            log.warning("Skipping unreadable directory %s", message)
        return

    for entry in entries:
        parts = rel_parts + (entry.name,)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            result.errors.append(f"{entry.path}: {e.strerror or e}")
            log.warning("Skipping unreadable entry %s: %s", entry.path, e)
            continue

        if is_dir:
            yield from _walk(Path(entry.path), parts, result)
        else:
            yield Path(entry.path), parts


def inventory_payload(entries: Iterable[MediaEntry]) -> dict[str, Any]:
    """Build the JSON payload served to the player."""
    media = [entry.to_dict() for entry in entries]
    return {"media": media, "count": len(media)}
