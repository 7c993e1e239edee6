"""Translate backpack.tf snapshot payloads into raw domain listings."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from snapsync.domain.model import RawListing

from .schema import ListingPayload

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

log = getLogger(__name__)


def parse_raw_listing(payload: ListingPayload | Mapping[str, object]) -> RawListing:
    listing = (
        payload if isinstance(payload, ListingPayload) else ListingPayload.model_validate(payload)
    )
    return RawListing(
        steamid=listing.steamid,
        intent=listing.intent,
        currencies=listing.currencies,
        details=listing.details,
        attribute_values=tuple(
            attribute.float_value
            for attribute in listing.item.attributes
            if attribute.float_value is not None
        ),
        has_user_agent=listing.has_user_agent,
    )


def parse_raw_listings(name: str, payloads: Iterable[Mapping[str, object]]) -> list[RawListing]:
    """Translate every well-formed record; malformed ones are logged and skipped."""

    parsed: list[RawListing] = []
    for index, payload in enumerate(payloads):
        try:
            parsed.append(parse_raw_listing(payload))
        except ValidationError as exc:
            log.warning(
                f"Ignoring malformed snapshot listing #{index} for {name}: "
                f"{exc.error_count()} validation error(s)"
            )
    return parsed
