"""Intra-batch deduplication phase."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import DropReason
from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from snapsync.domain.model import Listing, ListingKey

    from .context import ListingBatch, PipelineContext


class DeduplicationPhase(PipelinePhase):
    """Keeps the first listing per composite key, in batch order."""

    name: str = "deduplication"

    def run(self, batch: ListingBatch, *, context: PipelineContext) -> None:
        seen: set[ListingKey] = set()
        survivors: list[Listing] = []
        for listing in batch.listings:
            if listing.key in seen:
                context.drop(DropReason.DUPLICATE)
                continue
            seen.add(listing.key)
            survivors.append(listing)
        batch.listings[:] = survivors
