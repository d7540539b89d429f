"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_choice, optional_env_float, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .rebrickable import RebrickableConfig, get_rebrickable_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "MissingConfigurationError",
    "RateLimit",
    "RebrickableConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_rebrickable_config",
    "get_storage_config",
    "optional_env_choice",
    "optional_env_float",
    "require_env_var",
    "require_env_vars",
]
