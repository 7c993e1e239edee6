"""Trust and policy filters applied to raw snapshot records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import DropReason
from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from snapsync.domain.model import RawListing

    from .context import ListingBatch, PipelineContext
    from .policy import ListingPolicy


class FilteringPhase(PipelinePhase):
    """Drops records that are untrusted or excluded by the configured policy."""

    name: str = "filtering"

    def run(self, batch: ListingBatch, *, context: PipelineContext) -> None:
        survivors: list[RawListing] = []
        for record in batch.raw:
            reason = self._rejection(record, batch.name, context.policy)
            if reason is None:
                survivors.append(record)
            else:
                context.drop(reason)
        batch.raw[:] = survivors

    @staticmethod
    def _rejection(record: RawListing, name: str, policy: ListingPolicy) -> DropReason | None:
        # Only listings created by known pricing bots carry a user agent.
        if not record.has_user_agent:
            return DropReason.NO_USER_AGENT
        if policy.is_excluded_description(record.details):
            return DropReason.EXCLUDED_DESCRIPTION
        if policy.is_blocked_for(name, record.attribute_values):
            return DropReason.BLOCKED_ATTRIBUTE
        return None
