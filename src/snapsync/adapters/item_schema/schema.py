"""Pydantic models for the item schema service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SkuLookupResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    sku: str | None = None
    message: str | None = None
