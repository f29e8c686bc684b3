# SignSync Configuration Loader
# Load, save, and validate YAML configuration files

import copy
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from signsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from signsync.config.schema import SignSyncConfig
from signsync.errors import ConfigError

# Environment variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "MEDIA_DIR": ("media", "root"),
    "S3_BUCKET": ("storage", "bucket"),
    "S3_REGION": ("storage", "region"),
    "S3_PREFIX": ("storage", "prefix"),
    "S3_ENDPOINT_URL": ("storage", "endpoint_url"),
    "SYNC_INTERVAL_MINUTES": ("sync", "interval_minutes"),
}

INT_OVERRIDES = {"SYNC_INTERVAL_MINUTES"}


def get_config_dir() -> Path:
    """Get the SignSync configuration directory."""
    return Path.home() / ".config" / "signsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("SIGNSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None, *, use_env: bool = True) -> SignSyncConfig:
    """
    Load configuration from YAML file, defaults and environment.

    A missing file at the default location is not an error: the service is
    usually configured through environment variables alone.

    Args:
        config_path: Optional explicit path to config file.
        use_env: Apply environment variable overrides.

    Returns:
        SignSyncConfig: Validated configuration object.

    Raises:
        ConfigError: If an explicit file is missing, or the file is invalid.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = get_config_path()

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {config_path}")
    elif explicit:
        raise ConfigError(f"Configuration file not found: {config_path}\nRun 'signsync config init' to create one.")

    merged = _merge_with_defaults(data)
    if use_env:
        merged = apply_env_overrides(merged, os.environ)

    try:
        return SignSyncConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(e)) from e


def save_config(config: SignSyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(exclude_none=True, mode="json")

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without applying environment overrides.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]
    if not isinstance(data, dict):
        return False, ["Configuration root must be a mapping"]

    try:
        SignSyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        return False, _validation_messages(e)

    return True, []


def apply_env_overrides(data: dict[str, Any], environ: Any) -> dict[str, Any]:
    """
    Overlay environment variables onto a raw config dict.

    Empty values are ignored, as are non-integer values for integer settings.

    Args:
        data: Raw configuration dict (not modified).
        environ: Mapping of environment variables.

    Returns:
        New dict with overrides applied.
    """
    result = copy.deepcopy(data)
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if not value:
            continue
        if env_name in INT_OVERRIDES:
            try:
                value = int(value)
            except ValueError:
                continue
        result.setdefault(section, {})[key] = value
    return result


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = copy.deepcopy(DEFAULT_CONFIG)

    for section, values in data.items():
        if isinstance(values, dict) and isinstance(result.get(section), dict):
            result[section] = {**result[section], **values}
        else:
            result[section] = values

    return result


def _validation_messages(error: ValidationError) -> list[str]:
    messages = []
    for err in error.errors():
        loc = " -> ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return messages


def _format_validation_error(error: ValidationError) -> str:
    return "Invalid configuration:\n" + "\n".join(f"  {m}" for m in _validation_messages(error))
