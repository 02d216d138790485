"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging, resolve_log_level
from .reconciliation import (
    IMMEDIATE_UNKNOWN_ON_MISSING,
    ReconciliationConfig,
    get_reconciliation_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "IMMEDIATE_UNKNOWN_ON_MISSING",
    "ConfigurationError",
    "DatabaseConfig",
    "ReconciliationConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_reconciliation_config",
    "get_storage_config",
    "optional_env_var",
    "resolve_log_level",
]
