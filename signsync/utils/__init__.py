# SignSync Utilities Module
# Helper functions for path handling and atomic writes

from signsync.utils.paths import (
    atomic_stream_write,
    ensure_dir,
    is_partial_file,
    key_to_relative_path,
    local_path_for,
    relative_path_to_key,
    remove_partial_files,
    safe_delete,
)

__all__ = [
    "atomic_stream_write",
    "ensure_dir",
    "is_partial_file",
    "key_to_relative_path",
    "local_path_for",
    "relative_path_to_key",
    "remove_partial_files",
    "safe_delete",
]
