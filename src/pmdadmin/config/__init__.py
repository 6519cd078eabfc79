"""Application configuration helpers."""

from __future__ import annotations

from .blob import BlobStoreConfig, get_blob_store_config
from .catalog import (
    CatalogConfig,
    get_documents_catalog_config,
    get_gallery_catalog_config,
    with_listing_cache,
)
from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config

__all__ = [
    "NO_RETRY",
    "BlobStoreConfig",
    "CacheConfig",
    "CatalogConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_blob_store_config",
    "get_documents_catalog_config",
    "get_gallery_catalog_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
    "with_listing_cache",
]
