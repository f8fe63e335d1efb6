from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Iterator, Mapping, Tuple, Union

from .errors import ConfigurationError
from .project_constants import BALANCE_WEIGHTS

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    # str() first so floats like 1.15 keep their printed value
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers here")
    return Decimal(str(value))


@dataclass(frozen=True)
class WeightTable:
    """Ordered balance thresholds mapped to ticket multipliers.

    ``lookup`` returns the weight of the greatest threshold not above the
    balance, or the smallest weight in the table when the balance sits below
    the first threshold.
    """

    thresholds: Tuple[Decimal, ...]
    weights: Tuple[Decimal, ...]

    def __post_init__(self) -> None:
        if not self.thresholds:
            raise ConfigurationError("weight table must not be empty")
        if len(self.thresholds) != len(self.weights):
            raise ConfigurationError("weight table thresholds and weights differ in length")
        for value in self.thresholds + self.weights:
            if not value.is_finite():
                raise ConfigurationError(f"weight table entries must be finite (got {value})")
        for prev, cur in zip(self.thresholds, self.thresholds[1:]):
            if cur <= prev:
                raise ConfigurationError(
                    f"weight table thresholds must be strictly increasing ({prev} then {cur})"
                )
        for w in self.weights:
            if w < 0:
                raise ConfigurationError(f"weight table weights must be non-negative (got {w})")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[Number, Number]]) -> "WeightTable":
        thresholds = []
        weights = []
        try:
            for threshold, weight in pairs:
                thresholds.append(to_decimal(threshold))
                weights.append(to_decimal(weight))
        except (InvalidOperation, TypeError, ValueError) as e:
            raise ConfigurationError(f"weight table entries must be numeric: {e}") from e
        return cls(tuple(thresholds), tuple(weights))

    @classmethod
    def from_mapping(cls, mapping: Mapping[Number, Number]) -> "WeightTable":
        """Build a table from ``{threshold: weight}``; keys are sorted first."""
        try:
            items = sorted(mapping.items(), key=lambda kv: to_decimal(kv[0]))
        except (InvalidOperation, TypeError, ValueError) as e:
            raise ConfigurationError(f"weight table thresholds must be numeric: {e}") from e
        return cls.from_pairs(items)

    @classmethod
    def default(cls) -> "WeightTable":
        return cls.from_pairs(BALANCE_WEIGHTS)

    @property
    def min_weight(self) -> Decimal:
        return min(self.weights)

    def lookup(self, balance: Number) -> Decimal:
        idx = bisect_right(self.thresholds, to_decimal(balance)) - 1
        if idx < 0:
            return self.min_weight
        return self.weights[idx]

    def __iter__(self) -> Iterator[Tuple[Decimal, Decimal]]:
        return iter(zip(self.thresholds, self.weights))

    def __len__(self) -> int:
        return len(self.thresholds)
