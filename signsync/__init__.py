"""SignSync - S3 media sync for digital signage.

Keeps a local media directory synchronized with an S3 bucket and publishes
a consistent, name-sorted inventory of playable videos.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "MediaEntry",
    "SnapshotStore",
    "SyncEngine",
    "SyncResult",
    "SyncScheduler",
    "SignageContext",
    "build_context",
    "load_config",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("MediaEntry", "SnapshotStore", "SyncEngine", "SyncResult", "SyncScheduler"):
        from signsync import sync

        return getattr(sync, name)
    if name in ("SignageContext", "build_context"):
        from signsync import context

        return getattr(context, name)
    if name == "load_config":
        from signsync.config import load_config

        return load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
