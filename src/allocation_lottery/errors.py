"""
Exceptions raised by the allocation lottery.

Everything derives from LotteryError so callers can catch the whole family.
Validation errors also subclass ValueError.
"""

from __future__ import annotations

from typing import Any


class LotteryError(Exception):
    """Base exception for all allocation lottery errors"""


class ConfigurationError(LotteryError, ValueError):
    """Raised when lottery configuration is malformed (never silently coerced)"""


class BalanceValidationError(LotteryError, ValueError):
    """Raised when a supplied balance is negative or not a number"""

    def __init__(self, address: str, balance: Any, reason: str = "") -> None:
        self.address = address
        self.balance = balance
        super().__init__(
            f"Invalid balance {balance!r} for address {address}"
            + (f": {reason}" if reason else "")
        )


class LotteryNotRunError(LotteryError, RuntimeError):
    """Raised when results are read before LotteryService.run()"""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(f"'{attribute}' is not available until run() has been called")
