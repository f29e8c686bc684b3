# SignSync Errors
# Exception taxonomy shared by configuration, storage and sync components


class SignSyncError(Exception):
    """Base class for all SignSync errors."""


class ConfigError(SignSyncError):
    """Configuration could not be loaded or is invalid."""


class ListingError(SignSyncError):
    """Remote enumeration failed; the whole cycle is aborted without mutation."""


class FetchError(SignSyncError):
    """A single object could not be transferred; only that key is skipped."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{key}: {message}")
        self.key = key


class FilesystemError(SignSyncError):
    """A local filesystem operation (walk, mkdir, create, remove) failed."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class ScanError(FilesystemError):
    """The media root itself could not be walked."""
