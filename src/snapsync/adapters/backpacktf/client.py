"""HTTP client for the backpack.tf listing snapshot API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from snapsync.adapters.http_resilience import ResilienceConfig, ResilientClient
from snapsync.config.backpacktf import BACKPACKTF_BASE_URL, BackpackTfConfig
from snapsync.domain.errors import SourceUnavailable
from snapsync.domain.ports import SnapshotSource

from .schema import ErrorResponse, SnapshotResponse
from .translator import parse_raw_listings

if TYPE_CHECKING:
    from collections.abc import Callable

    from snapsync.domain.model import RawListing

log = getLogger(__name__)

SNAPSHOT_PATH = "classifieds/listings/snapshot"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class BackpackTfSnapshotSource:
    config: BackpackTfConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def fetch(self, name: str) -> list[RawListing] | None:
        return asyncio.run(self._fetch_async(name))

    async def _fetch_async(self, name: str) -> list[RawListing] | None:
        base_url = self.config.resilience.base_url or BACKPACKTF_BASE_URL
        params = httpx.QueryParams(
            {"sku": name, "appid": self.config.appid, "token": self.config.api_key}
        )
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(f"{base_url}{SNAPSHOT_PATH}", params=params)
            except httpx.HTTPError as exc:
                raise SourceUnavailable(f"Snapshot request for {name!r} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        payload = self._decode(name, response)

        try:
            snapshot = SnapshotResponse.model_validate(payload)
        except ValidationError as exc:
            raise SourceUnavailable(f"Unexpected snapshot payload for {name!r}") from exc

        if snapshot.listings is None:
            return None
        return parse_raw_listings(name, snapshot.listings)

    @staticmethod
    def _decode(name: str, response: httpx.Response) -> dict[str, object]:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            message = f"Snapshot API returned {response.status_code} for {name!r}"
            try:
                detail = ErrorResponse.model_validate(response.json()).message
            except (ValueError, ValidationError):
                detail = None
            if detail:
                message = f"{message}: {detail}"
            log.error(message)
            raise SourceUnavailable(message) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceUnavailable(f"Snapshot response for {name!r} is not JSON") from exc
        if not isinstance(payload, dict):
            raise SourceUnavailable(f"Unexpected snapshot payload for {name!r}")
        return payload


if TYPE_CHECKING:
    _source_check: SnapshotSource = BackpackTfSnapshotSource(
        config=BackpackTfConfig(api_key="", resilience=ResilienceConfig(name="check"))
    )
