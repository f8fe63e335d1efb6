from __future__ import annotations

import logging
import random
from bisect import bisect_right
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, TypeVar

from .errors import ConfigurationError
from .participant import Participant

log = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


def build_ranges(weights: Sequence[float]) -> Tuple[List[float], float]:
    """Cumulative (exclusive) range ends for each weight, plus the total."""
    ends: List[float] = []
    cursor = 0.0
    for w in weights:
        cursor += w
        ends.append(cursor)
    return ends, cursor


def find_index(ends: Sequence[float], ticket: float) -> int:
    idx = bisect_right(ends, ticket)
    # Float rounding can push the ticket onto the final end
    return min(idx, len(ends) - 1)


def weighted_sample(
    items: Iterable[T],
    k: int,
    *,
    weight: Callable[[T], float],
    rng: RandomSource,
) -> List[T]:
    """Draw ``k`` distinct items, each draw proportional to remaining weight.

    Every round picks ``r`` uniformly in ``[0, total)`` and takes the first
    item whose cumulative weight exceeds it; the item is then removed. With
    ``k >= len(items)`` every item comes back, in a weight-biased order.
    """
    if k < 0:
        raise ValueError(f"sample size must not be negative (got {k})")

    remaining = list(items)
    weights = [float(weight(item)) for item in remaining]
    for item, w in zip(remaining, weights):
        if w <= 0:
            raise ValueError(f"weighted sampling needs positive weights (got {w} for {item!r})")

    picked: List[T] = []
    while remaining and len(picked) < k:
        ends, total = build_ranges(weights)
        idx = find_index(ends, rng.random() * total)
        picked.append(remaining.pop(idx))
        weights.pop(idx)
    return picked


def ticket_weight(p: Participant) -> float:
    return float(p.tickets)


def selection_probabilities(pool: Iterable[Participant]) -> Dict[str, float]:
    """Single-draw probability of each address: tickets / total tickets."""
    pool = [p for p in pool if p.tickets > 0]
    total = sum((p.tickets for p in pool), Decimal(0))
    if total <= 0:
        return {}
    return {p.address: float(p.tickets / total) for p in pool}


def reserved_slot_count(remaining_slots: int, ratio: float, reserved_pool_size: int) -> int:
    # Half-up rounding; Python's round() would round 2.5 down to 2
    wanted = (Decimal(remaining_slots) * Decimal(str(ratio))).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    return max(0, min(int(wanted), reserved_pool_size, remaining_slots))


class WeightedDrawEngine:
    def __init__(
        self,
        max_winners: int,
        privileged_never_winning_ratio: float = 0.0,
        rng: Optional[RandomSource] = None,
    ) -> None:
        if max_winners < 0:
            raise ConfigurationError(f"max_winners must not be negative (got {max_winners})")
        if not 0 <= privileged_never_winning_ratio <= 1:
            raise ConfigurationError(
                "privileged_never_winning_ratio must be within [0, 1] "
                f"(got {privileged_never_winning_ratio})"
            )
        self.max_winners = max_winners
        self.privileged_never_winning_ratio = privileged_never_winning_ratio
        self.rng = rng if rng is not None else random.SystemRandom()

    def draw(
        self,
        competitive: Iterable[Participant],
        guaranteed: Iterable[Participant] = (),
    ) -> List[Participant]:
        winners = list(guaranteed)
        pool = [p for p in competitive if p.tickets > 0]

        remaining_slots = max(0, self.max_winners - len(winners))
        if remaining_slots == 0 or not pool:
            log.info(
                "No weighted draw needed: %d guaranteed winners, %d open slots, pool of %d",
                len(winners),
                remaining_slots,
                len(pool),
            )
            return self._mark(winners)

        reserved_pool = [p for p in pool if not p.is_past_winner]
        reserved_slots = reserved_slot_count(
            remaining_slots, self.privileged_never_winning_ratio, len(reserved_pool)
        )
        log.info(
            "Drawing %d slots (%d reserved for never-winners) from a pool of %d (%d never won)",
            remaining_slots,
            reserved_slots,
            len(pool),
            len(reserved_pool),
        )

        reserved_winners = weighted_sample(
            reserved_pool, reserved_slots, weight=ticket_weight, rng=self.rng
        )
        winners.extend(reserved_winners)

        drawn = {p.address for p in reserved_winners}
        general_pool = [p for p in pool if p.address not in drawn]
        general_slots = remaining_slots - reserved_slots
        general_winners = weighted_sample(
            general_pool, general_slots, weight=ticket_weight, rng=self.rng
        )
        winners.extend(general_winners)

        if len(general_winners) < general_slots:
            log.warning(
                "Pool exhausted: filled %d of %d open slots",
                len(reserved_winners) + len(general_winners),
                remaining_slots,
            )
        return self._mark(winners)

    @staticmethod
    def _mark(winners: List[Participant]) -> List[Participant]:
        for p in winners:
            p.selected = True
            log.debug("Winner %s (%s, %s tickets)", p.address, p.tier.value, p.tickets)
        return winners
