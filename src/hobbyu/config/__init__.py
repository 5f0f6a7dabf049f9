"""Configuration package for Hobby University."""

from hobbyu.config.app_config import (
    AppConfig,
    CertificateConfig,
    ConfigError,
    SignupConfig,
    TrialConfig,
    clear_config_cache,
    get_data_dir,
    load_app_config,
)
from hobbyu.config.catalog import (
    Catalog,
    Course,
    CourseTemplate,
    load_catalog,
)

__all__ = [
    "AppConfig",
    "CertificateConfig",
    "ConfigError",
    "SignupConfig",
    "TrialConfig",
    "clear_config_cache",
    "get_data_dir",
    "load_app_config",
    "Catalog",
    "Course",
    "CourseTemplate",
    "load_catalog",
]
