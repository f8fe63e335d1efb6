from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Collection, Dict, List, Mapping, Tuple

from .config import LotteryConfig
from .errors import BalanceValidationError
from .participant import ExclusionReason, Participant, Tier
from .weights import to_decimal

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of one classification pass, every listing ordered by address."""

    participants: Tuple[Participant, ...]

    @property
    def eligibles(self) -> List[Participant]:
        return [p for p in self.participants if p.eligible]

    @property
    def competitive(self) -> List[Participant]:
        return [p for p in self.participants if p.eligible and not p.is_guaranteed]

    @property
    def guaranteed(self) -> List[Participant]:
        return [p for p in self.participants if p.is_guaranteed]

    @property
    def excluded(self) -> List[Participant]:
        return [p for p in self.participants if not p.eligible]


def validate_balances(balances: Mapping[str, Any]) -> Dict[str, Decimal]:
    out: Dict[str, Decimal] = {}
    for addr, raw in balances.items():
        try:
            bal = to_decimal(raw)
        except (InvalidOperation, TypeError, ValueError):
            raise BalanceValidationError(addr, raw, "not a number") from None
        if not bal.is_finite():
            raise BalanceValidationError(addr, raw, "not a finite number")
        if bal < 0:
            raise BalanceValidationError(addr, raw, "balances must not be negative")
        out[addr] = bal
    return out


class EligibilityClassifier:
    def __init__(self, config: LotteryConfig) -> None:
        self.config = config

    def compute_tickets(self, balance: Decimal) -> Tuple[Decimal, Decimal]:
        """Return ``(weight, tickets)`` for a competitive balance."""
        weight = self.config.weight_table.lookup(balance)
        whole_tickets = int(balance // self.config.ticket_price)
        return weight, whole_tickets * weight

    def classify(
        self,
        balances: Mapping[str, Any],
        *,
        blacklist: Collection[str] = (),
        recent_winners: Collection[str] = (),
        past_winners: Collection[str] = (),
        nft_rare_holders: Collection[str] = (),
        nft_common_holders: Collection[str] = (),
    ) -> Classification:
        owner_to_balance = validate_balances(balances)
        cfg = self.config

        participants: List[Participant] = []
        # Deterministic ordering (critical for reproducibility)
        for addr in sorted(owner_to_balance):
            if addr in blacklist:
                log.debug("Dropped %s: blacklisted", addr)
                continue

            bal = owner_to_balance[addr]
            p = Participant(
                address=addr,
                balance=bal,
                is_past_winner=addr in past_winners,
                is_recent_winner=addr in recent_winners,
            )
            participants.append(p)

            if addr in nft_rare_holders:
                p.make_guaranteed(Tier.NFT_RARE)
                continue

            if bal < cfg.ticket_price:
                p.exclude(ExclusionReason.INSUFFICIENT_BALANCE)
                log.debug("Excluded %s: balance %s below ticket price", addr, bal)
                continue

            holds_common_nft = addr in nft_common_holders
            if (
                p.is_recent_winner
                and bal < cfg.no_cooldown_minimum_balance
                and not holds_common_nft
            ):
                p.exclude(ExclusionReason.COOLDOWN)
                log.debug("Excluded %s: recent winner in cooldown", addr)
                continue

            p.tier = Tier.NFT_COMMON if holds_common_nft else Tier.NORMAL
            p.eligible = True
            p.weight, p.tickets = self.compute_tickets(bal)

        self._promote_top_holders(participants)

        result = Classification(tuple(participants))
        log.info(
            "Classified %d addresses: %d eligible (%d competitive, %d guaranteed), %d excluded",
            len(result.participants),
            len(result.eligibles),
            len(result.competitive),
            len(result.guaranteed),
            len(result.excluded),
        )
        return result

    def _promote_top_holders(self, participants: List[Participant]) -> None:
        n = self.config.top_n_holders
        if n <= 0:
            return
        candidates = [p for p in participants if p.eligible and not p.is_guaranteed]
        # Highest balance first, ties by address
        candidates.sort(key=lambda p: (-p.balance, p.address))
        for p in candidates[:n]:
            p.make_guaranteed(Tier.TOP_HOLDER)
            log.debug("Promoted %s to top holder (balance %s)", p.address, p.balance)
