"""Public interface for the item schema adapter."""

from __future__ import annotations

from .client import KEY_ITEM_NAME, KEY_ITEM_SKU, ItemSchemaSkuResolver
from .schema import SkuLookupResponse

__all__ = ["KEY_ITEM_NAME", "KEY_ITEM_SKU", "ItemSchemaSkuResolver", "SkuLookupResponse"]
