"""
Obsidian Dev Helper Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from the working directory into os.environ at import time
# so the nested BaseSettings classes can read the values
load_dotenv()


class VaultSettings(BaseSettings):
    """Target vault settings."""

    model_config = SettingsConfigDict(env_prefix="DEVHELPER_VAULT_")

    path: Path | None = Field(default=None, description="Path to the Obsidian vault")


class BuildSettings(BaseSettings):
    """Plugin build settings."""

    model_config = SettingsConfigDict(env_prefix="DEVHELPER_BUILD_")

    command: str = Field(default="npm run dev", description="Watch-mode build command")
    delay_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Quiet period after the last artifact write before installing",
    )
    directory: Path = Field(default=Path("."), description="Build output directory")
    manifest_file: Path | None = Field(
        default=None,
        description="Plugin manifest, defaults to manifest.json in the build directory",
    )

    @property
    def resolved_manifest_file(self) -> Path:
        """Manifest path with the build directory default applied."""
        if self.manifest_file is not None:
            return self.manifest_file
        return self.directory / "manifest.json"


class ReloadSettings(BaseSettings):
    """Plugin reload settings."""

    model_config = SettingsConfigDict(env_prefix="DEVHELPER_RELOAD_")

    enabled: bool = Field(default=True, description="Reload the plugin after installing")
    scheme: str = Field(default="obsidian")
    action: str = Field(default="devtool-reload")


class WatcherSettings(BaseSettings):
    """File watcher and process lifecycle settings."""

    model_config = SettingsConfigDict(env_prefix="DEVHELPER_WATCHER_")

    use_polling: bool = Field(default=False, description="Use a polling observer")
    stop_timeout_seconds: float = Field(default=5.0, ge=0.0)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="DEVHELPER_LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"
    file_path: Path | None = Field(default=None)

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept any case for the level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("format")
    @classmethod
    def check_format(cls, v: str) -> str:
        """Only the two supported renderers are allowed."""
        if v not in ("json", "console"):
            raise ValueError(f"unknown log format: {v}")
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="obsidian-dev-helper")
    app_version: str = Field(default="0.1.0")

    # Sub-settings
    vault: VaultSettings = Field(default_factory=VaultSettings)
    build: BuildSettings = Field(default_factory=BuildSettings)
    reload: ReloadSettings = Field(default_factory=ReloadSettings)
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings built from the environment.
    The CLI layers its arguments on top with ``model_copy``.
    """
    return Settings()
