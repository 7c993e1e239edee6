"""Item name to SKU resolution backed by the item schema service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from snapsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from snapsync.config.item_schema import ITEM_SCHEMA_BASE_URL, ItemSchemaConfig
from snapsync.domain.errors import (
    NoMatchingCatalogEntry,
    SnapsyncError,
    SourceInitFailed,
    SourceUnavailable,
)
from snapsync.domain.ports import SkuResolver

from .schema import SkuLookupResponse

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

# Used to verify the service answers sensibly before the first pass.
KEY_ITEM_NAME: Final[str] = "Mann Co. Supply Crate Key"
KEY_ITEM_SKU: Final[str] = "5021;6"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class ItemSchemaSkuResolver:
    config: ItemSchemaConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def initialize(self) -> None:
        try:
            sku = self.resolve(KEY_ITEM_NAME)
        except SnapsyncError as exc:
            raise SourceInitFailed(f"Item schema service is not usable: {exc}") from exc
        if sku != KEY_ITEM_SKU:
            raise SourceInitFailed(
                f"Item schema service resolved {KEY_ITEM_NAME!r} to {sku!r}, "
                f"expected {KEY_ITEM_SKU!r}"
            )
        log.info("Item schema service ready")

    def resolve(self, name: str) -> str:
        return asyncio.run(self._resolve_async(name))

    async def _resolve_async(self, name: str) -> str:
        base_url = self.config.resilience.base_url or ITEM_SCHEMA_BASE_URL
        url = f"{base_url}getSku/fromName/{quote(name, safe='')}"
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(url)
                if response.status_code == httpx.codes.NOT_FOUND:
                    raise NoMatchingCatalogEntry(name, f"Item schema has no SKU for {name!r}")
                response.raise_for_status()
                payload = SkuLookupResponse.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise SourceUnavailable(f"SKU lookup for {name!r} failed: {exc}") from exc
            except (ValueError, ValidationError) as exc:
                raise SourceUnavailable(f"Unexpected SKU lookup payload for {name!r}") from exc

        if not payload.success or not payload.sku:
            raise NoMatchingCatalogEntry(
                name, payload.message or f"Item schema has no SKU for {name!r}"
            )
        return payload.sku


if TYPE_CHECKING:
    _resolver_check: SkuResolver = ItemSchemaSkuResolver(
        config=ItemSchemaConfig(resilience=ResilienceConfig(name="check"))
    )
