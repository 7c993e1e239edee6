"""Entry points for running the listing ingest pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import ListingBatch, PipelineContext
from .deduplication import DeduplicationPhase
from .filtering import FilteringPhase
from .normalization import NormalizationPhase
from .orchestrator import IngestionPipeline

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from snapsync.domain.model import Listing, RawListing

    from .policy import ListingPolicy


def default_pipeline() -> IngestionPipeline:
    return (
        IngestionPipeline()
        .with_phase(FilteringPhase())
        .with_phase(NormalizationPhase())
        .with_phase(DeduplicationPhase())
    )


def run_ingest_pipeline(
    *,
    name: str,
    sku: str,
    records: Iterable[RawListing],
    policy: ListingPolicy,
    clock: Callable[[], float] | None = None,
) -> tuple[list[Listing], PipelineContext]:
    """Filter, canonicalize and deduplicate ``records`` for one catalog item."""

    context = PipelineContext(policy=policy)
    if clock is not None:
        context.clock = clock
    batch = ListingBatch(name=name, sku=sku, raw=list(records))
    default_pipeline().run(batch, context=context)
    return batch.listings, context
