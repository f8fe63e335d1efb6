from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping

from dotenv import load_dotenv

from .errors import ConfigurationError
from .project_constants import (
    DEFAULT_MAX_WINNERS,
    DEFAULT_PRIVILEGED_NEVER_WINNING_RATIO,
    DEFAULT_TOP_N_HOLDERS,
    NO_COOLDOWN_MINIMUM_BALANCE,
    TICKET_PRICE,
)
from .weights import WeightTable, to_decimal


@dataclass(frozen=True)
class LotteryConfig:
    ticket_price: Decimal = Decimal(TICKET_PRICE)
    no_cooldown_minimum_balance: Decimal = Decimal(NO_COOLDOWN_MINIMUM_BALANCE)
    weight_table: WeightTable = field(default_factory=WeightTable.default)
    max_winners: int = DEFAULT_MAX_WINNERS
    top_n_holders: int = DEFAULT_TOP_N_HOLDERS
    privileged_never_winning_ratio: float = DEFAULT_PRIVILEGED_NEVER_WINNING_RATIO

    def __post_init__(self) -> None:
        # Normalise numeric inputs on a frozen instance
        for name in ("ticket_price", "no_cooldown_minimum_balance"):
            try:
                object.__setattr__(self, name, to_decimal(getattr(self, name)))
            except (InvalidOperation, TypeError, ValueError) as e:
                raise ConfigurationError(f"{name} must be numeric: {e}") from e
            if not getattr(self, name).is_finite():
                raise ConfigurationError(f"{name} must be finite (got {getattr(self, name)})")

        if self.ticket_price <= 0:
            raise ConfigurationError(f"ticket_price must be positive (got {self.ticket_price})")
        if self.no_cooldown_minimum_balance <= 0:
            raise ConfigurationError(
                "no_cooldown_minimum_balance must be positive "
                f"(got {self.no_cooldown_minimum_balance})"
            )
        if not isinstance(self.weight_table, WeightTable):
            # Plain (threshold, weight) pairs are accepted and validated strictly
            if isinstance(self.weight_table, (str, bytes, Mapping)):
                raise ConfigurationError(
                    "weight_table must be a WeightTable or (threshold, weight) pairs"
                )
            object.__setattr__(self, "weight_table", WeightTable.from_pairs(self.weight_table))
        for name in ("max_winners", "top_n_holders"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer (got {value!r})")
            if value < 0:
                raise ConfigurationError(f"{name} must not be negative (got {value})")

        ratio = self.privileged_never_winning_ratio
        if isinstance(ratio, bool) or not isinstance(ratio, (int, float, Decimal)):
            raise ConfigurationError(
                f"privileged_never_winning_ratio must be a number (got {ratio!r})"
            )
        if isinstance(ratio, Decimal) and not ratio.is_finite():
            raise ConfigurationError(
                f"privileged_never_winning_ratio must be within [0, 1] (got {ratio})"
            )
        if not 0 <= ratio <= 1:
            raise ConfigurationError(
                f"privileged_never_winning_ratio must be within [0, 1] (got {ratio})"
            )

    def replace(self, **changes: Any) -> "LotteryConfig":
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e

    @staticmethod
    def from_env(**overrides: Any) -> "LotteryConfig":
        load_dotenv()

        values: Dict[str, Any] = {}
        for name, (env_var, parse) in _ENV_FIELDS.items():
            raw = os.getenv(env_var, "").strip()
            if not raw:
                continue
            try:
                values[name] = parse(raw)
            except (InvalidOperation, ValueError) as e:
                raise ConfigurationError(f"{env_var}={raw!r} is not valid: {e}") from e

        # Explicit arguments win over the environment
        values.update(overrides)
        try:
            return LotteryConfig(**values)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e


_ENV_FIELDS: Dict[str, tuple[str, Callable[[str], Any]]] = {
    "ticket_price": ("LOTTERY_TICKET_PRICE", Decimal),
    "no_cooldown_minimum_balance": ("LOTTERY_NO_COOLDOWN_MINIMUM_BALANCE", Decimal),
    "max_winners": ("LOTTERY_MAX_WINNERS", int),
    "top_n_holders": ("LOTTERY_TOP_N_HOLDERS", int),
    "privileged_never_winning_ratio": ("LOTTERY_PRIVILEGED_NEVER_WINNING_RATIO", float),
}
