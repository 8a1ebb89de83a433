"""Party store configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, ShouldCacheHook

STORE_TIMEOUT_SECONDS: Final[float] = 10.0
CACHE_MODES: Final[frozenset[str]] = frozenset({"off", "sqlite"})


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Holds the remote party store connection settings."""

    base_url: str
    resilience: ResilienceConfig
    auth_token: str | None = None

    @property
    def has_session(self) -> bool:
        return self.auth_token is not None


def _cache_from_environment(should_cache: ShouldCacheHook | None) -> CacheConfig | None:
    mode = (optional_env_var("SANTAPY_HTTP_CACHE") or "off").lower()
    if mode not in CACHE_MODES:
        allowed = ", ".join(sorted(CACHE_MODES))
        raise ConfigurationError(f"SANTAPY_HTTP_CACHE must be one of: {allowed}")
    if mode == "off":
        return None
    return CacheConfig(should_cache=should_cache)


def get_store_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> StoreConfig:
    values = require_env_vars(("SANTAPY_API_URL",))
    base_url = values["SANTAPY_API_URL"].rstrip("/") + "/"
    auth_token = optional_env_var("SANTAPY_AUTH_TOKEN")
    headers = {"Accept": "application/json"}
    if auth_token is not None:
        headers["Authorization"] = f"Bearer {auth_token}"
    return StoreConfig(
        base_url=base_url,
        auth_token=auth_token,
        resilience=resilience
        or ResilienceConfig(
            name="party-store",
            base_url=base_url,
            timeout_seconds=optional_float_env_var(
                "SANTAPY_TIMEOUT_SECONDS", default=STORE_TIMEOUT_SECONDS
            ),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            cache=_cache_from_environment(cache_predicate),
            default_headers=headers,
        ),
    )
