# SignSync Configuration Schema
# Pydantic models for YAML configuration validation

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_EXTENSIONS = [".mp4", ".avi", ".mov", ".mkv", ".webm", ".m4v", ".3gp"]


class MediaConfig(BaseModel):
    """Local media directory settings."""

    root: str = Field(default="./media", description="Local media root directory")
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Recognized media file extensions (case-insensitive)",
    )
    url_prefix: str = Field(default="/media/", description="Prefix of the serving URL for each entry")
    publish_partial_scans: bool = Field(
        default=False,
        description="Publish whatever was collected when the media root cannot be walked",
    )

    @field_validator("root")
    @classmethod
    def expand_root(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure each starts with a dot."""
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = "." + ext
            normalized.append(ext)
        return normalized

    @field_validator("url_prefix")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """URL prefix always ends with a slash."""
        return v if v.endswith("/") else v + "/"


class StorageConfig(BaseModel):
    """Remote object store settings."""

    bucket: str = Field(default="", description="Bucket name; empty disables remote sync")
    region: str = Field(default="sa-east-1", description="Bucket region")
    prefix: str = Field(default="", description="Only keys under this prefix are synced")
    endpoint_url: str | None = Field(default=None, description="Custom endpoint (MinIO, SeaweedFS, ...)")
    connect_timeout: float = Field(default=10.0, gt=0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=60.0, gt=0, description="Read timeout in seconds")
    max_attempts: int = Field(default=3, ge=1, description="Retry attempts per request")

    @property
    def enabled(self) -> bool:
        """Remote sync runs only when a bucket is configured."""
        return bool(self.bucket)

    @field_validator("prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Strip leading slashes; a non-empty prefix ends with a slash."""
        v = v.lstrip("/")
        if v and not v.endswith("/"):
            v += "/"
        return v


class SyncConfig(BaseModel):
    """Reconciliation schedule and state settings."""

    interval_minutes: float = Field(default=15, gt=0, description="Minutes between reconciliation cycles")
    state_file: str = Field(
        default="~/.config/signsync/.sync_state.yaml",
        description="Where the last reconciled inventory is persisted",
    )

    @field_validator("state_file")
    @classmethod
    def expand_state_file(cls, v: str) -> str:
        """Expand ~ in path."""
        return str(Path(v).expanduser())

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60


class OutputConfig(BaseModel):
    """Output and logging configuration."""

    verbose: bool = Field(default=False, description="Enable verbose output")
    colored: bool = Field(default=True, description="Enable colored output")
    log_file: str | None = Field(default=None, description="Path to log file")

    @field_validator("log_file")
    @classmethod
    def expand_optional_path(cls, v: str | None) -> str | None:
        """Expand ~ in optional paths."""
        if v is None:
            return None
        return str(Path(v).expanduser())


class SignSyncConfig(BaseModel):
    """Root configuration model for SignSync."""

    media: MediaConfig = Field(default_factory=MediaConfig, description="Local media settings")
    storage: StorageConfig = Field(default_factory=StorageConfig, description="Remote store settings")
    sync: SyncConfig = Field(default_factory=SyncConfig, description="Sync schedule settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")

    @property
    def media_root(self) -> Path:
        return Path(self.media.root)

    @property
    def state_path(self) -> Path:
        return Path(self.sync.state_file)
