"""Listing ingest pipeline.

Snapshot records pass through explicit, testable phases that share a
``PipelineContext``: trust and policy filtering, normalization into canonical
listings, and intra-batch deduplication.
"""

from __future__ import annotations

from .context import DropReason, ListingBatch, PipelineContext
from .deduplication import DeduplicationPhase
from .filtering import FilteringPhase
from .normalization import SNAPSHOT_BACKOFF_SECONDS, NormalizationPhase
from .orchestrator import IngestionPipeline, PipelinePhase
from .policy import ListingPolicy, normalize_description
from .runner import default_pipeline, run_ingest_pipeline

__all__ = [
    "SNAPSHOT_BACKOFF_SECONDS",
    "DeduplicationPhase",
    "DropReason",
    "FilteringPhase",
    "IngestionPipeline",
    "ListingBatch",
    "ListingPolicy",
    "NormalizationPhase",
    "PipelineContext",
    "PipelinePhase",
    "default_pipeline",
    "normalize_description",
    "run_ingest_pipeline",
]
