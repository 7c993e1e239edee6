"""Normalization phase: canonical listings from filtered records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from snapsync.domain.model import Currencies, Intent, Listing

from .context import DropReason
from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from .context import ListingBatch, PipelineContext

# Snapshot results can be up to a minute old; backdating keeps them from outranking
# fresher updates that reached the store through other channels.
SNAPSHOT_BACKOFF_SECONDS: Final[int] = 60


class NormalizationPhase(PipelinePhase):
    name: str = "normalization"

    def run(self, batch: ListingBatch, *, context: PipelineContext) -> None:
        updated = int(context.clock()) - SNAPSHOT_BACKOFF_SECONDS
        context.updated = updated

        for record in batch.raw:
            currencies = Currencies.from_payload(record.currencies)
            if currencies is None:
                context.drop(DropReason.INVALID_CURRENCIES)
                continue
            intent = Intent.parse(record.intent)
            if intent is None:
                context.drop(DropReason.UNKNOWN_INTENT)
                continue
            batch.listings.append(
                Listing(
                    name=batch.name,
                    sku=batch.sku,
                    currencies=currencies,
                    intent=intent,
                    updated=updated,
                    steamid=record.steamid,
                )
            )
            context.normalized += 1
