"""Pydantic models describing the backpack.tf snapshot payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _lenient_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float | str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


class BackpackTfBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AttributePayload(BackpackTfBaseModel):
    defindex: int | str | None = None
    float_value: float | None = None

    _parse_float = field_validator("float_value", mode="before")(_lenient_float)


class ItemPayload(BackpackTfBaseModel):
    defindex: int | None = None
    quality: int | None = None
    attributes: list[AttributePayload] = Field(default_factory=list)

    @field_validator("attributes", mode="before")
    @classmethod
    def _keep_attribute_objects(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list):
            items = cast(list[object], value)
            return [item for item in items if isinstance(item, Mapping)]
        return value


class ListingPayload(BackpackTfBaseModel):
    steamid: str
    intent: str
    details: str | None = None
    item: ItemPayload = Field(default_factory=ItemPayload)
    currencies: dict[str, object] = Field(default_factory=dict)
    user_agent: object | None = Field(default=None, alias="userAgent")
    timestamp: int | None = None
    bump: int | None = None

    @field_validator("steamid", mode="before")
    @classmethod
    def _steamid_as_text(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("intent", mode="before")
    @classmethod
    def _numeric_intent(cls, value: object) -> object:
        # Older payloads encode intent as 0 (buy) / 1 (sell).
        if value in (0, "0"):
            return "buy"
        if value in (1, "1"):
            return "sell"
        return value

    @field_validator("details", mode="before")
    @classmethod
    def _details_as_text(cls, value: object) -> object:
        return value if isinstance(value, str) or value is None else None

    @property
    def has_user_agent(self) -> bool:
        if isinstance(self.user_agent, Mapping):
            return True
        return bool(self.user_agent)


class SnapshotResponse(BackpackTfBaseModel):
    """Snapshot envelope; ``listings`` is absent when the name is unknown."""

    listings: list[dict[str, object]] | None = None
    appid: int | None = None
    sku: str | None = None
    created_at: int | None = Field(default=None, alias="createdAt")


class ErrorResponse(BackpackTfBaseModel):
    message: str
