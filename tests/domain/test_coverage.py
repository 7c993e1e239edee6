from __future__ import annotations

import pytest

from snapsync.domain.coverage import has_sufficient_coverage, is_sufficient
from snapsync.domain.model import Intent, IntentCounts
from tests.helpers.listings import FakeListingRepository, make_listing


@pytest.mark.parametrize(
    ("sell", "buy", "expected"),
    [
        (1, 10, True),
        (5, 25, True),
        (0, 10, False),
        (1, 9, False),
        (0, 0, False),
    ],
)
def test_is_sufficient_thresholds(sell: int, buy: int, expected: bool) -> None:
    assert is_sufficient(IntentCounts(buy=buy, sell=sell)) is expected


def test_has_sufficient_coverage_counts_only_the_named_item() -> None:
    repository = FakeListingRepository()
    repository.add_all(make_listing(f"buyer-{i}", name="X") for i in range(10))
    repository.add_all([make_listing("seller", name="Y", intent=Intent.SELL)])

    assert has_sufficient_coverage(repository, "X") is False

    repository.add_all([make_listing("seller", name="X", intent=Intent.SELL)])

    assert has_sufficient_coverage(repository, "X") is True
