"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .store import StoreConfig, get_store_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StoreConfig",
    "get_store_config",
    "optional_env_var",
    "optional_float_env_var",
    "require_env_vars",
]
