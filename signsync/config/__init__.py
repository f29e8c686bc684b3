# SignSync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from signsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from signsync.config.loader import (
    ConfigError,
    apply_env_overrides,
    ensure_config_exists,
    get_config_path,
    load_config,
    save_config,
    validate_config_file,
)
from signsync.config.schema import (
    DEFAULT_EXTENSIONS,
    MediaConfig,
    OutputConfig,
    SignSyncConfig,
    StorageConfig,
    SyncConfig,
)

__all__ = [
    # Schema
    "SignSyncConfig",
    "MediaConfig",
    "StorageConfig",
    "SyncConfig",
    "OutputConfig",
    "DEFAULT_EXTENSIONS",
    # Loader
    "ConfigError",
    "load_config",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    "apply_env_overrides",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
