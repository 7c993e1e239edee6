"""Application configuration helpers."""

from __future__ import annotations

from .backpacktf import BackpackTfConfig, get_backpacktf_config
from .env import env_path, optional_env_var, require_env_var
from .errors import ConfigurationError, InvalidConfigurationFile, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .item_schema import ItemSchemaConfig, get_item_schema_config
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_http_cache_path,
    get_storage_config,
)
from .worker import DatabaseSettings, WorkerConfig, WorkerSettings, get_worker_config

__all__ = [
    "BackpackTfConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "DatabaseSettings",
    "InvalidConfigurationFile",
    "ItemSchemaConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "WorkerConfig",
    "WorkerSettings",
    "configure_logging",
    "env_path",
    "get_backpacktf_config",
    "get_database_config",
    "get_http_cache_path",
    "get_item_schema_config",
    "get_storage_config",
    "get_worker_config",
    "optional_env_var",
    "require_env_var",
]
