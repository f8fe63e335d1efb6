"""
Shared fixtures: the small holder scenario used across the suite.
"""

import random
from decimal import Decimal
from typing import Any, Dict

import pytest

from allocation_lottery.config import LotteryConfig
from allocation_lottery.weights import WeightTable


@pytest.fixture
def weight_table() -> WeightTable:
    return WeightTable.from_mapping(
        {
            0: "0.00",
            250: "1.00",
            1_000: "1.10",
            3_000: "1.15",
            10_000: "1.20",
            30_000: "1.25",
        }
    )


@pytest.fixture
def simple_config(weight_table: WeightTable) -> LotteryConfig:
    """Top holders and the never-winner quota switched off, so only weights matter"""
    return LotteryConfig(
        ticket_price=Decimal(250),
        no_cooldown_minimum_balance=Decimal(30_000),
        weight_table=weight_table,
        max_winners=500,
        top_n_holders=0,
        privileged_never_winning_ratio=0,
    )


@pytest.fixture
def balances() -> Dict[str, int]:
    return {
        "0x111": 249,  # not enough balance
        "0x222": 250,  # eligible, never participated
        "0x333": 1_000,  # eligible, never participated
        "0x444": 3_000,  # eligible, never participated
        "0x555": 3_000,  # eligible, past winner but not in cooldown
        "0x666": 3_000,  # recent winner in cooldown
        "0x777": 30_000,  # recent winner, skips cooldown by balance
        "0x888": 1_000_000_000,  # blacklisted
        "0x010": 0,  # rare NFT holder, always wins
        "0x020": 3_000,  # recent winner, skips cooldown by common NFT
    }


@pytest.fixture
def address_sets() -> Dict[str, Any]:
    return {
        "past_winners": ["0x555"],
        "recent_winners": ["0x666", "0x777", "0x020"],
        "blacklist": ["0x888"],
        "nft_rare_holders": ["0x010"],
        "nft_common_holders": ["0x020"],
    }


@pytest.fixture
def rng() -> random.Random:
    return random.Random(20_240_601)
