"""Item schema (name to SKU) service configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

ITEM_SCHEMA_BASE_URL = "https://schema.autobot.tf/"
ITEM_SCHEMA_TIMEOUT_SECONDS = 10.0
# Refreshed only when the game schema changes, a day is plenty.
ITEM_SCHEMA_CACHE_TTL_SECONDS = 24 * 60 * 60.0


@dataclass(frozen=True)
class ItemSchemaConfig:
    resilience: ResilienceConfig


def _cache_successful_lookup(payload: object) -> bool:
    return isinstance(payload, dict) and payload.get("success") is True


def get_item_schema_config(*, resilience: ResilienceConfig | None = None) -> ItemSchemaConfig:
    base_url = optional_env_var("SNAPSYNC_SCHEMA_URL") or ITEM_SCHEMA_BASE_URL
    return ItemSchemaConfig(
        resilience=resilience
        or ResilienceConfig(
            name="item-schema",
            base_url=base_url,
            timeout_seconds=ITEM_SCHEMA_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(
                backend="sqlite",
                ttl_seconds=ITEM_SCHEMA_CACHE_TTL_SECONDS,
                should_cache=_cache_successful_lookup,
            ),
        ),
    )
