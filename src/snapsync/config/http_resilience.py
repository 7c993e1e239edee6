"""Resilience settings for the outbound HTTP clients."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx
from httpx_retries import Retry

if TYPE_CHECKING:
    from pathlib import Path

# Cloudflare sits in front of backpack.tf and answers 52x while the origin is unhealthy.
TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset(
    {429, 500, 502, 503, 504, 520, 521, 522, 524}
)
DEFAULT_USER_AGENT: Final[str] = "snapsync (listing snapshot worker)"

CachePredicate = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retries GETs on transient failures with jittered exponential backoff."""

    attempts: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    statuses: frozenset[int] = TRANSIENT_STATUSES

    def build(self) -> Retry:
        return Retry(
            total=self.attempts,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=True,
            allowed_methods=("GET",),
            status_forcelist=tuple(sorted(self.statuses)),
            retry_on_exceptions=(
                httpx.TimeoutException,
                httpx.NetworkError,
                httpx.RemoteProtocolError,
            ),
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """hishel response cache; ``should_cache`` sees the decoded JSON body."""

    backend: Literal["sqlite", "memory"] = "memory"
    path: Path | None = None
    ttl_seconds: float | None = None
    should_cache: CachePredicate | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    user_agent: str = DEFAULT_USER_AGENT
