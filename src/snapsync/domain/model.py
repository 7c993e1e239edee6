"""Listing entities reconciled into the store."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator


class Intent(StrEnum):
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: object) -> Intent | None:
        if isinstance(value, Intent):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


def format_number(value: float) -> str:
    """Render a number the way the listing source prints it (``2.0`` -> ``"2"``)."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _compact(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


class Currencies(BaseModel):
    """Validated price of a listing in keys and refined metal."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    keys: float = Field(default=0, ge=0, allow_inf_nan=False)
    metal: float = Field(default=0, ge=0, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _require_a_price(cls, value: object) -> object:
        if isinstance(value, Mapping):
            mapping = cast(Mapping[str, object], value)
            if "keys" not in mapping and "metal" not in mapping:
                raise ValueError("currencies must contain keys or metal")
        return value

    @field_validator("metal")
    @classmethod
    def _round_metal(cls, value: float) -> float:
        return round(value, 2)

    @classmethod
    def from_payload(cls, payload: object) -> Currencies | None:
        """Return canonical currencies, or ``None`` when the payload has an unknown shape."""

        if not isinstance(payload, Mapping):
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError:
            return None

    @classmethod
    def from_json(cls, value: str) -> Currencies:
        return cls.model_validate(json.loads(value))

    def to_json(self) -> str:
        return json.dumps(
            {"keys": _compact(self.keys), "metal": _compact(self.metal)},
            separators=(",", ":"),
        )


class ListingKey(NamedTuple):
    """Composite identity of a stored listing."""

    steamid: str
    name: str
    sku: str
    intent: Intent


@dataclass(frozen=True, slots=True)
class RawListing:
    """One listing record as reported by the snapshot source, before any policy applies."""

    steamid: str
    intent: str
    currencies: Mapping[str, object]
    details: str | None = None
    attribute_values: tuple[float, ...] = ()
    has_user_agent: bool = False


@dataclass(frozen=True, slots=True)
class Listing:
    name: str
    sku: str
    currencies: Currencies
    intent: Intent
    updated: int
    steamid: str

    @property
    def key(self) -> ListingKey:
        return ListingKey(self.steamid, self.name, self.sku, self.intent)


@dataclass(slots=True)
class IntentCounts:
    buy: int = 0
    sell: int = 0

