"""Trust and content policy applied to snapshot listings."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from snapsync.domain.model import format_number

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


def normalize_description(text: str) -> str:
    return unicodedata.normalize("NFKD", text).lower().strip()


@dataclass(frozen=True, slots=True)
class ListingPolicy:
    """Excluded description phrases and blocked attribute values.

    ``blocked_attributes`` maps an exemption key to a blocked float value. An item
    whose name contains any of the keys is exempt from the attribute check, because
    for those items the value denotes a distinct variant rather than a paint or part.
    """

    excluded_descriptions: tuple[str, ...] = ()
    blocked_attributes: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(
        cls,
        excluded_descriptions: Iterable[str],
        blocked_attributes: Mapping[str, float | int | str],
    ) -> ListingPolicy:
        phrases = tuple(
            phrase
            for phrase in (normalize_description(raw) for raw in excluded_descriptions)
            if phrase
        )
        blocked = {
            key: value if isinstance(value, str) else format_number(value)
            for key, value in blocked_attributes.items()
        }
        return cls(excluded_descriptions=phrases, blocked_attributes=blocked)

    def is_excluded_description(self, details: str | None) -> bool:
        if not details or not self.excluded_descriptions:
            return False
        normalized = normalize_description(details)
        return any(phrase in normalized for phrase in self.excluded_descriptions)

    def is_blocked_for(self, name: str, attribute_values: Iterable[float]) -> bool:
        if not self.blocked_attributes:
            return False
        blocked_values = set(self.blocked_attributes.values())
        has_blocked = any(
            value and format_number(value) in blocked_values for value in attribute_values
        )
        if not has_blocked:
            return False
        return not any(key in name for key in self.blocked_attributes)
