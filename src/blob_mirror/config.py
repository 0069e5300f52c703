# ABOUTME: Configuration loading and validation for blob-mirror.
# ABOUTME: Merges .env files, an optional YAML settings file and the environment.

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import yaml
from dotenv import load_dotenv

CONNECTION_STRING_ENV = "TGF_AZURE_BLOB_STORAGE_CONNECTION_STRING"
CONTAINER_ENV = "TGF_AZURE_BLOB_STORAGE_CONTAINER"
DISCORD_WEBHOOK_ENV = "TGF_DISCORD_WEBHOOK_URL"
NOTIFY_ON_ENV = "TGF_NOTIFY_ON"

# Selects the .env.<environment> variants
ENVIRONMENT_ENV = "TGF_ENV"
DEFAULT_ENVIRONMENT = "development"


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


class MissingSettingError(ConfigError):
    """Raised when a required setting has no value."""

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(message)


@dataclass
class NotificationConfig:
    """Configuration for notifications."""
    discord_webhook_url: str | None = None
    notify_on: str = "error"  # "always" or "error"

    def __post_init__(self):
        # notify_on only matters once a webhook is configured
        if self.discord_webhook_url and self.notify_on not in ("always", "error"):
            raise ConfigError(f"notify_on must be 'always' or 'error', got '{self.notify_on}'")


@dataclass
class Config:
    """Main configuration for blob-mirror."""
    connection_string: str | None = None
    container_name: str | None = None
    notifications: NotificationConfig = field(default_factory=NotificationConfig)

    def get_connection_string(self) -> str:
        """Return the storage account connection string or raise."""
        if not self.connection_string:
            raise MissingSettingError(
                "connection_string",
                f"Please define the connection string to the Azure storage account ({CONNECTION_STRING_ENV})!",
            )
        return self.connection_string

    def get_container_name(self) -> str:
        """Return the container name or raise."""
        if not self.container_name:
            raise MissingSettingError(
                "container",
                f"Please define the container name inside the Azure storage account ({CONTAINER_ENV})!",
            )
        return self.container_name


def dotenv_files(environment: str) -> tuple[str, ...]:
    """Names of the .env files to load, most specific first."""
    return (
        f".env.{environment}.local",
        ".env.local",
        f".env.{environment}",
        ".env",
    )


def load_dotenv_files(directory: Path | None = None, environment: str | None = None) -> list[Path]:
    """Load .env files from a directory into the process environment.

    Files are loaded most specific first. Variables that are already set,
    by the process or by an earlier file, are never overridden.

    Args:
        directory: Directory to look in. Defaults to the working directory.
        environment: Name for the .env.<environment> variants. Defaults to
            $TGF_ENV, then "development".

    Returns:
        The files that were found and loaded.
    """
    directory = directory or Path.cwd()
    environment = environment or _clean(os.environ.get(ENVIRONMENT_ENV)) or DEFAULT_ENVIRONMENT
    loaded = []
    for name in dotenv_files(environment):
        path = directory / name
        if path.is_file():
            load_dotenv(path, override=False)
            loaded.append(path)
    return loaded


def _clean(value) -> str | None:
    """Trim a setting value; blank values count as missing."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def load_settings_file(path: Path) -> dict:
    """Load and validate a YAML settings file."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")

    # An empty file is an empty mapping
    if raw is None:
        return {}

    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    notifications = raw.get("notifications", {})
    if notifications is not None and not isinstance(notifications, dict):
        raise ConfigError("'notifications' must be a mapping")

    return raw


def load_config(
    settings_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build the configuration from an optional settings file and the environment.

    Environment variables take precedence over the settings file. Required
    values are not checked here; use Config.get_connection_string() and
    Config.get_container_name().

    Args:
        settings_path: Optional YAML settings file.
        environ: Environment mapping. Defaults to os.environ.
    """
    if environ is None:
        environ = os.environ

    raw = load_settings_file(settings_path) if settings_path else {}
    notif_raw = raw.get("notifications") or {}

    notify_on = _clean(environ.get(NOTIFY_ON_ENV)) or _clean(notif_raw.get("notify_on")) or "error"
    notifications = NotificationConfig(
        discord_webhook_url=(
            _clean(environ.get(DISCORD_WEBHOOK_ENV))
            or _clean(notif_raw.get("discord_webhook_url"))
        ),
        notify_on=notify_on,
    )

    return Config(
        connection_string=(
            _clean(environ.get(CONNECTION_STRING_ENV))
            or _clean(raw.get("connection_string"))
        ),
        container_name=(
            _clean(environ.get(CONTAINER_ENV))
            or _clean(raw.get("container"))
        ),
        notifications=notifications,
    )
