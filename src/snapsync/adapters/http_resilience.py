"""Rate-limited, retrying and optionally caching async HTTP client."""

from __future__ import annotations

import json
from functools import cache
from logging import getLogger
from typing import TYPE_CHECKING, Any, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import RetryTransport

from snapsync.config.http_resilience import (
    CacheConfig,
    CachePredicate,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from snapsync.config.storage import get_http_cache_path

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import QueryParamTypes, URLTypes

__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
]

log = getLogger(__name__)


class GetOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    timeout: float


class ResilientClient:
    """Async client for one upstream service.

    Requests wait for the service's rate limiter, then go through the retry
    transport and, when the config carries a cache, through hishel.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            None if config.ratelimit is None else _service_limiter(config.name, config.ratelimit)
        )
        self._client = _build_client(config)

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

    async def get(self, url: URLTypes, **options: Unpack[GetOptions]) -> httpx.Response:
        if self._limiter is None:
            response = await self._client.get(url, **options)
        else:
            async with self._limiter:
                response = await self._client.get(url, **options)
        # Query strings carry API tokens; log the path only.
        request_url = response.request.url
        log.debug(
            f"[{self.config.name}] GET {request_url.host}{request_url.path} "
            f"-> {response.status_code}"
        )
        return response


@cache
def _service_limiter(name: str, ratelimit: RateLimit) -> AsyncLimiter:  # noqa: ARG001
    """One limiter per service name and rate, shared by every client built for it."""

    return AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds)


def _build_client(config: ResilienceConfig) -> httpx.AsyncClient:
    options: dict[str, Any] = {
        "timeout": config.timeout_seconds,
        "transport": RetryTransport(retry=config.retry.build()),
        "headers": {"User-Agent": config.user_agent},
    }
    storage, policy = _build_cache_components(config.cache)
    if storage is None:
        return httpx.AsyncClient(**options)
    return AsyncCacheClient(**options, storage=storage, policy=policy)


class _PayloadFilter(BaseFilter[HishelCacheResponse]):
    """Admits a response to the cache only when its JSON body satisfies the predicate."""

    def __init__(self, predicate: CachePredicate) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if not body:
            return False
        try:
            payload = json.loads(body)
        except ValueError:
            return False
        return bool(self._predicate(payload))


def _build_cache_components(
    config: CacheConfig | None,
) -> tuple[AsyncSqliteStorage | None, FilterPolicy | None]:
    if config is None:
        return None, None

    if config.backend == "sqlite":
        database_path = str(config.path or get_http_cache_path())
    elif config.backend == "memory":
        database_path = ":memory:"
    else:
        raise ValueError(f"Unsupported cache backend: {config.backend}")

    storage = AsyncSqliteStorage(database_path=database_path, default_ttl=config.ttl_seconds)
    policy = (
        None
        if config.should_cache is None
        else FilterPolicy(response_filters=[_PayloadFilter(config.should_cache)])
    )
    return storage, policy
