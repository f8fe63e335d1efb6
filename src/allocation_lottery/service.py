from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .config import LotteryConfig
from .draw import RandomSource, WeightedDrawEngine, selection_probabilities
from .eligibility import Classification, EligibilityClassifier
from .errors import LotteryNotRunError
from .participant import Participant

log = logging.getLogger(__name__)


class LotteryService:
    """Classify holders and draw the winners of one allocation lottery.

    Keyword overrides are ``LotteryConfig`` field names and are applied on
    top of ``config``, e.g. ``LotteryService(balances, max_winners=1)``.
    """

    def __init__(
        self,
        balances: Mapping[str, Any],
        *,
        recent_winners: Iterable[str] = (),
        past_winners: Iterable[str] = (),
        blacklist: Iterable[str] = (),
        nft_rare_holders: Iterable[str] = (),
        nft_common_holders: Iterable[str] = (),
        config: Optional[LotteryConfig] = None,
        rng: Optional[RandomSource] = None,
        **overrides: Any,
    ) -> None:
        base = config if config is not None else LotteryConfig()
        self.config = base.replace(**overrides) if overrides else base

        self.balances = dict(balances)
        self.recent_winners = frozenset(recent_winners)
        self.past_winners = frozenset(past_winners)
        self.blacklist = frozenset(blacklist)
        self.nft_rare_holders = frozenset(nft_rare_holders)
        self.nft_common_holders = frozenset(nft_common_holders)

        self.classifier = EligibilityClassifier(self.config)
        self.engine = WeightedDrawEngine(
            max_winners=self.config.max_winners,
            privileged_never_winning_ratio=self.config.privileged_never_winning_ratio,
            rng=rng,
        )

        self._classification: Optional[Classification] = None
        self._winners: List[Participant] = []

    def classify(self) -> Classification:
        """Run eligibility only; no randomness involved."""
        return self.classifier.classify(
            self.balances,
            blacklist=self.blacklist,
            recent_winners=self.recent_winners,
            past_winners=self.past_winners,
            nft_rare_holders=self.nft_rare_holders,
            nft_common_holders=self.nft_common_holders,
        )

    def run(self) -> List[Participant]:
        log.info("Lottery run over %d addresses", len(self.balances))
        classification = self.classify()
        winners = self.engine.draw(classification.competitive, classification.guaranteed)

        self._classification = classification
        self._winners = winners
        log.info(
            "Lottery finished: %d winners, %s total tickets",
            len(winners),
            self.total_tickets,
        )
        return list(winners)

    def _require_run(self, attribute: str) -> Classification:
        if self._classification is None:
            raise LotteryNotRunError(attribute)
        return self._classification

    @property
    def participants(self) -> List[Participant]:
        return self._require_run("participants").competitive

    @property
    def eligibles(self) -> List[Participant]:
        return self._require_run("eligibles").eligibles

    @property
    def excluded(self) -> List[Participant]:
        return self._require_run("excluded").excluded

    @property
    def winners(self) -> List[Participant]:
        self._require_run("winners")
        return list(self._winners)

    @property
    def total_tickets(self) -> Decimal:
        return sum((p.tickets for p in self.participants), Decimal(0))

    def probabilities(self) -> Dict[str, float]:
        return selection_probabilities(self.participants)
