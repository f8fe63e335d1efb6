"""
Tests for the balance -> weight lookup table
"""

from decimal import Decimal

import pytest

from allocation_lottery.errors import ConfigurationError
from allocation_lottery.project_constants import BALANCE_WEIGHTS
from allocation_lottery.weights import WeightTable


def test_default_table_matches_constants() -> None:
    table = WeightTable.default()

    assert len(table) == 6
    assert list(table) == [(Decimal(t), w) for t, w in BALANCE_WEIGHTS]


@pytest.mark.parametrize(
    "balance, expected",
    [
        (0, "0.00"),
        (249, "0.00"),
        (250, "1.00"),
        (999, "1.00"),
        (1_000, "1.10"),
        (3_000, "1.15"),
        (9_999, "1.15"),
        (10_000, "1.20"),
        (30_000, "1.25"),
        (1_000_000_000, "1.25"),
    ],
)
def test_lookup_uses_greatest_threshold_not_above_balance(balance: int, expected: str) -> None:
    assert WeightTable.default().lookup(balance) == Decimal(expected)


def test_lookup_below_first_threshold_falls_back_to_min_weight() -> None:
    table = WeightTable.from_pairs([(100, 2), (500, 3)])

    assert table.lookup(50) == Decimal(2)
    assert table.min_weight == Decimal(2)


def test_lookup_accepts_decimal_and_float_balances() -> None:
    table = WeightTable.default()

    assert table.lookup(Decimal("2999.99")) == Decimal("1.10")
    assert table.lookup(3000.0) == Decimal("1.15")


def test_from_mapping_sorts_thresholds() -> None:
    table = WeightTable.from_mapping({1_000: "1.1", 0: "0", 250: "1"})

    assert table.thresholds == (Decimal(0), Decimal(250), Decimal(1_000))
    assert table.lookup(600) == Decimal(1)


def test_empty_table_rejected() -> None:
    with pytest.raises(ConfigurationError, match="empty"):
        WeightTable.from_pairs([])


def test_unsorted_table_rejected() -> None:
    with pytest.raises(ConfigurationError, match="strictly increasing"):
        WeightTable.from_pairs([(0, 0), (1_000, 1.1), (250, 1)])


def test_duplicate_threshold_rejected() -> None:
    with pytest.raises(ConfigurationError, match="strictly increasing"):
        WeightTable.from_pairs([(250, 1), (250, 2)])


def test_negative_weight_rejected() -> None:
    with pytest.raises(ConfigurationError, match="non-negative"):
        WeightTable.from_pairs([(0, -1)])


def test_non_numeric_entry_rejected() -> None:
    with pytest.raises(ConfigurationError, match="numeric"):
        WeightTable.from_pairs([(0, "heavy")])


@pytest.mark.parametrize(
    "pairs",
    [
        [(0, "nan"), (250, 1)],
        [(0, 0), (250, float("inf"))],
        [("nan", 0), (250, 1)],
        [(0, 0), (float("inf"), 1)],
    ],
)
def test_non_finite_entry_rejected(pairs: list) -> None:
    with pytest.raises(ConfigurationError, match="finite"):
        WeightTable.from_pairs(pairs)


def test_from_mapping_rejects_nan_threshold() -> None:
    with pytest.raises(ConfigurationError):
        WeightTable.from_mapping({0: 0, "nan": 1})
