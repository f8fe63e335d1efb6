"""
Default parameters for the token-sale allocation lottery.

These values define the public rules of the draw.
Changing them changes eligibility and MUST be publicly announced.
"""

from decimal import Decimal

# Maximum number of winners per lottery
DEFAULT_MAX_WINNERS = 500

# One ticket per TICKET_PRICE tokens held; also the minimum balance to qualify
TICKET_PRICE = 250

# Recent winners holding at least this much skip the cooldown period
NO_COOLDOWN_MINIMUM_BALANCE = 30_000

# Largest holders that win unconditionally (outside the weighted draw)
DEFAULT_TOP_N_HOLDERS = 10

# Share of the open slots reserved for addresses that never won before
DEFAULT_PRIVILEGED_NEVER_WINNING_RATIO = 0.1

# Balance threshold -> ticket multiplier, ascending
BALANCE_WEIGHTS = (
    (0, Decimal("0.00")),
    (250, Decimal("1.00")),
    (1_000, Decimal("1.10")),
    (3_000, Decimal("1.15")),
    (10_000, Decimal("1.20")),
    (30_000, Decimal("1.25")),
)
