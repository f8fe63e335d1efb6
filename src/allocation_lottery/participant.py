from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


class Tier(str, enum.Enum):
    NORMAL = "normal"
    NFT_RARE = "nft_rare"
    NFT_COMMON = "nft_common"
    TOP_HOLDER = "top_holder"
    EXCLUDED = "excluded"


class ExclusionReason(str, enum.Enum):
    INSUFFICIENT_BALANCE = "insufficient_balance"
    COOLDOWN = "cooldown"


# Tiers that win outside the weighted draw
GUARANTEED_TIERS = frozenset({Tier.NFT_RARE, Tier.TOP_HOLDER})


@dataclass
class Participant:
    """One address taking part in a lottery run.

    ``weight`` and ``tickets`` are filled in by the classifier and
    ``selected`` by the draw engine; everything else is fixed at construction.
    """

    address: str
    balance: Decimal
    is_past_winner: bool = False
    is_recent_winner: bool = False
    tier: Tier = Tier.NORMAL
    weight: Decimal = Decimal(0)
    tickets: Decimal = Decimal(0)
    eligible: bool = False
    exclusion_reason: Optional[ExclusionReason] = None
    selected: bool = False

    @property
    def is_guaranteed(self) -> bool:
        return self.eligible and self.tier in GUARANTEED_TIERS

    @property
    def is_competitive(self) -> bool:
        return self.eligible and not self.is_guaranteed and self.tickets > 0

    def exclude(self, reason: ExclusionReason) -> None:
        self.tier = Tier.EXCLUDED
        self.eligible = False
        self.exclusion_reason = reason
        self.weight = Decimal(0)
        self.tickets = Decimal(0)

    def make_guaranteed(self, tier: Tier) -> None:
        if tier not in GUARANTEED_TIERS:
            raise ValueError(f"{tier.value} is not a guaranteed-winner tier")
        self.tier = tier
        self.eligible = True
        self.weight = Decimal(0)
        self.tickets = Decimal(0)
