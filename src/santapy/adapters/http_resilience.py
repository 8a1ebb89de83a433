"""Resilient async HTTP client used by the party store adapter."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from santapy.common.storage import get_http_cache_path

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from santapy.config.http_resilience import (
        CacheConfig,
        ResilienceConfig,
        ResponseHook,
        RetryPolicy,
        ShouldCacheHook,
    )

log = getLogger(__name__)


class RequestOptions(TypedDict, total=False):
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    event_hooks: dict[str, list[ResponseHook]]
    transport: httpx.AsyncBaseTransport


def build_retry(policy: RetryPolicy) -> Retry:
    """Translate a ``RetryPolicy`` into the transport's retry schedule."""

    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_async_client(config: ResilienceConfig) -> httpx.AsyncClient:
    """Create the underlying client, cached when ``config.cache`` asks for it."""

    options: AsyncClientOptions = {
        "timeout": config.timeout_seconds,
        "transport": RetryTransport(retry=build_retry(config.retry)),
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)
    if config.response_hooks:
        options["event_hooks"] = {"response": list(config.response_hooks)}

    storage, policy = _build_cache_components(config.cache)
    if storage is None:
        return httpx.AsyncClient(**options)
    return AsyncCacheClient(**options, storage=storage, policy=policy)


class ResilientClient:
    """Retrying, optionally rate limited and cached client; one per store call."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = None
        if config.ratelimit is not None:
            self._limiter = AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
        self._client = build_async_client(config)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        # httpx's delete() shortcut takes no body, so every verb goes through here
        if self._limiter is not None:
            async with self._limiter:
                response = await self._client.request(method, url, **kwargs)
        else:
            response = await self._client.request(method, url, **kwargs)
        log.debug(f"[{self.config.name}] {method} {response.url} -> {response.status_code}")
        return response

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def delete(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)


class _ShouldCacheResponseFilter(BaseFilter[HishelCacheResponse]):
    """Only store responses whose JSON body passes ``predicate``."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if not body:
            return False
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False
        return bool(self._predicate(payload))


def _build_cache_components(
    config: CacheConfig | None,
) -> tuple[AsyncSqliteStorage | None, FilterPolicy | None]:
    if config is None or not config.enabled:
        return None, None

    storage = AsyncSqliteStorage(
        database_path=config.sqlite_path or str(get_http_cache_path()),
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )
    policy: FilterPolicy | None = None
    if config.should_cache is not None:
        policy = FilterPolicy(response_filters=[_ShouldCacheResponseFilter(config.should_cache)])
    return storage, policy
