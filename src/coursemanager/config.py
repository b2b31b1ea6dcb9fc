"""Configuration loading for Course Manager."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from coursemanager.services.models import EnrollmentPolicy

CONFIG_FILE_NAME = "coursemanager.yaml"
DEFAULT_DB_PATH = "coursemanager.db"


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class DatabaseConfig:
    """Database settings.

    ``transactional: false`` runs the store without explicit transactions;
    every save is then committed immediately.
    """

    path: str = DEFAULT_DB_PATH
    transactional: bool = True


@dataclass
class LoggingConfig:
    """Logging settings. None means use the logging module defaults."""

    dir: str | None = None
    level: str | None = None


@dataclass
class ApiConfig:
    """REST API server settings."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    """Course Manager configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    enrollment: EnrollmentPolicy = field(default_factory=EnrollmentPolicy)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    root_path: Path = field(default_factory=Path)

    @classmethod
    def from_dict(cls, data: dict[str, Any], root_path: Path) -> AppConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML.
            root_path: Directory containing the config file; relative database
                paths are resolved against it.

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If a value has the wrong type or is out of range.
        """
        db_data = _section(data, "database")
        database = DatabaseConfig(
            path=str(db_data.get("path", DEFAULT_DB_PATH)),
            transactional=_bool(db_data, "transactional", True),
        )

        enrollment_data = _section(data, "enrollment")
        enrollment = EnrollmentPolicy(
            max_enrollments=_positive_int(enrollment_data, "max_enrollments", 5),
            grading_period_days=_positive_int(enrollment_data, "grading_period_days", 30),
            minimum_age=_positive_int(enrollment_data, "minimum_age", 18),
        )

        log_data = _section(data, "logging")
        logging_config = LoggingConfig(
            dir=log_data.get("dir"),
            level=log_data.get("level"),
        )

        api_data = _section(data, "api")
        api = ApiConfig(
            host=str(api_data.get("host", "127.0.0.1")),
            port=_positive_int(api_data, "port", 8000),
        )

        return cls(
            database=database,
            enrollment=enrollment,
            logging=logging_config,
            api=api,
            root_path=root_path,
        )

    def get_db_path(self) -> str:
        """Database path with relative paths resolved against the config directory."""
        if self.database.path == ":memory:" or Path(self.database.path).is_absolute():
            return self.database.path
        return str(self.root_path / self.database.path)


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _bool(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def apply_env_overrides(config: AppConfig) -> AppConfig:
    """Apply COURSEMANAGER_* environment variables on top of a config."""
    db_path = os.environ.get("COURSEMANAGER_DB_PATH")
    if db_path:
        config.database.path = db_path
    log_dir = os.environ.get("COURSEMANAGER_LOG_DIR")
    if log_dir:
        config.logging.dir = log_dir
    log_level = os.environ.get("COURSEMANAGER_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level
    return config


def load_config(config_path: Path | str) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to coursemanager.yaml file.

    Returns:
        Parsed configuration object, environment overrides applied.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return apply_env_overrides(AppConfig.from_dict(data, config_path.parent))


def find_config(start_path: Path | str | None = None) -> Path | None:
    """Find coursemanager.yaml by walking up the directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to the config file, or None if there is none.
    """
    current = Path.cwd() if start_path is None else Path(start_path)
    current = current.resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path
    return None


def resolve_config(config_path: Path | str | None = None) -> AppConfig:
    """Load the given config file, else a discovered one, else defaults.

    Raises:
        ConfigError: If an explicit or discovered file is invalid.
    """
    if config_path is None:
        config_path = find_config()
    if config_path is None:
        return apply_env_overrides(AppConfig(root_path=Path.cwd()))
    return load_config(config_path)
