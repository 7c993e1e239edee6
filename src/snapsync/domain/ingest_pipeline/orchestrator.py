"""Ordered execution of the listing ingest phases."""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .context import ListingBatch, PipelineContext

log = getLogger(__name__)


class PipelinePhase(Protocol):
    """One step of the ingest pipeline; mutates the batch in place."""

    name: str

    def run(self, batch: ListingBatch, *, context: PipelineContext) -> None: ...


@dataclass(frozen=True, slots=True)
class IngestionPipeline:
    phases: tuple[PipelinePhase, ...] = ()

    def with_phase(self, phase: PipelinePhase) -> IngestionPipeline:
        return replace(self, phases=(*self.phases, phase))

    def run(self, batch: ListingBatch, *, context: PipelineContext) -> ListingBatch:
        """Run every phase in order; drops are tallied on ``context`` per phase."""

        for phase in self.phases:
            before = context.dropped_total
            phase.run(batch, context=context)
            dropped = context.dropped_total - before
            if dropped:
                log.debug(f"{phase.name} dropped {dropped} record(s) for {batch.name}")
        return batch
