"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var
from .errors import ConfigurationError, InvalidConfigurationError
from .logging import configure_logging
from .reconcile import get_reconcile_policy
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_reconcile_policy",
    "get_storage_config",
    "optional_env_var",
]
