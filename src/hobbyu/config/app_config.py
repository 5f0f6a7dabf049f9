"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from hobbyu.config.app_config import load_app_config

    config = load_app_config()
    config.trial.length_days  # 90
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to the data directory)
CONFIG_FILENAME = Path("config/app_config_v1.yaml")
DATA_DIR_ENV = "HOBBYU_DATA_DIR"

# Longest trial the progress figures support
MAX_TRIAL_LENGTH_DAYS = 90


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


@dataclass
class TrialConfig:
    """Trial course rules."""

    length_days: int = 90


@dataclass
class SignupConfig:
    """Sign-up form constraints."""

    min_password_length: int = 6
    min_age: int = 13
    max_age: int = 100


@dataclass
class CertificateConfig:
    """Certificate presentation settings."""

    institution: str = "University of Hobby Excellence"
    credit_hours: int = 90
    date_format: str = "%B %d, %Y"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    trial: TrialConfig = field(default_factory=TrialConfig)
    signup: SignupConfig = field(default_factory=SignupConfig)
    certificate: CertificateConfig = field(default_factory=CertificateConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def db_path(self) -> Path:
        """Path to the SQLite database file."""
        return self.data_dir / self.paths.get("database", "db/hobbyu.db")

    @property
    def catalog_path(self) -> Path:
        """Path to the course catalog YAML."""
        return self.data_dir / self.paths.get("catalog", "config/catalog_v1.yaml")


# Module-level cache
_cached_config: AppConfig | None = None


def get_data_dir() -> Path:
    """Resolve the data directory from the environment."""
    return Path(os.environ.get(DATA_DIR_ENV, "data"))


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "trial": {
            "length_days": 90,
        },
        "signup": {
            "min_password_length": 6,
            "min_age": 13,
            "max_age": 100,
        },
        "certificate": {
            "institution": "University of Hobby Excellence",
            "credit_hours": 90,
            "date_format": "%B %d, %Y",
        },
        "paths": {
            "database": "db/hobbyu.db",
            "catalog": "config/catalog_v1.yaml",
        },
    }


def _parse_config(data: dict[str, Any], data_dir: Path) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    trial_data = data.get("trial") or {}
    length_days = int(trial_data.get("length_days", defaults["trial"]["length_days"]))
    if not 1 <= length_days <= MAX_TRIAL_LENGTH_DAYS:
        raise ConfigError(
            "trial.length_days",
            f"must be between 1 and {MAX_TRIAL_LENGTH_DAYS}, got {length_days}",
        )
    trial = TrialConfig(length_days=length_days)

    signup_data = data.get("signup") or {}
    signup = SignupConfig(
        min_password_length=int(signup_data.get("min_password_length", 6)),
        min_age=int(signup_data.get("min_age", 13)),
        max_age=int(signup_data.get("max_age", 100)),
    )

    cert_data = data.get("certificate") or {}
    certificate = CertificateConfig(
        institution=cert_data.get("institution", defaults["certificate"]["institution"]),
        credit_hours=int(cert_data.get("credit_hours", 90)),
        date_format=cert_data.get("date_format", "%B %d, %Y"),
    )

    paths = dict(defaults["paths"])
    paths.update(data.get("paths") or {})

    return AppConfig(
        data_dir=data_dir,
        trial=trial,
        signup=signup,
        certificate=certificate,
        paths=paths,
    )


def load_app_config(
    data_dir: Path | None = None,
    force_reload: bool = False,
) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        data_dir: Data directory. Defaults to $HOBBYU_DATA_DIR or ./data
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if data_dir is None:
        data_dir = get_data_dir()

    if (
        _cached_config is not None
        and not force_reload
        and _cached_config.data_dir == data_dir
    ):
        return _cached_config

    config_file = data_dir / CONFIG_FILENAME
    data: dict[str, Any]

    if config_file.exists():
        logger.debug("loading_app_config", source=str(config_file))
        data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config", data_dir=str(data_dir))
        data = _get_defaults()

    _cached_config = _parse_config(data, data_dir)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
