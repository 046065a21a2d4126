"""
Alert Pydantic schemas for BingX Relay.

Describes the inbound TradingView alert as a closed set of strictly typed
fields. Every scalar is a string on the wire (prices and sizes included) and
no type coercion is performed: a JSON number where a string is expected is a
validation error. Validated alerts are frozen and never mutated afterwards.
"""

import math
from typing import Tuple

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator

SIDES = ("LONG", "SHORT")
BE_TARGET_TRIGGERS = ("1", "2", "3", "WITHOUT")


def _parse_number(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return number


def parse_investment(value: str) -> float:
    """
    PURPOSE: Parse a take-profit investment share such as "50%" or "50".

    Only the first "%" is removed before parsing.

    Args:
        value: Investment string from a take-profit tier.

    Returns:
        float: Percentage of the total position size, e.g. 50.0.

    Raises:
        ValueError: If the remainder is not a number.
    """
    return float(value.replace("%", "", 1))


class TakeProfitTier(BaseModel):
    """
    Schema for one take-profit level.

    Attributes:
        price: Take-profit price as a numeric string (e.g. '31968.5')
        investment: Share of the position closed at this level (e.g. '50%')
    """

    model_config = ConfigDict(frozen=True)

    price: StrictStr
    investment: StrictStr

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: str) -> str:
        """Validate that price is a numeric string."""
        try:
            _parse_number(v)
        except ValueError:
            raise ValueError("price must be a numeric string")
        return v

    @field_validator("investment")
    @classmethod
    def validate_investment(cls, v: str) -> str:
        """Validate that investment is a percentage in (0, 100]."""
        try:
            pct = parse_investment(v)
        except ValueError:
            raise ValueError("investment must be a percentage string")
        if not 0 < pct <= 100:
            raise ValueError("investment must be greater than 0 and at most 100")
        return v


class Alert(BaseModel):
    """
    Schema for an inbound TradingView alert.

    Attributes:
        symbol: Instrument as sent by TradingView (e.g. 'BTCUSDT', 'ETHUSDT.P')
        side: Position direction, 'LONG' or 'SHORT'
        entry: Entry price as a numeric string
        stop: Stop-loss price as a numeric string
        size: Position size in quote currency as a numeric string
        winrate: Strategy win rate, informational only
        strategy: Strategy name, informational only
        beTargetTrigger: Break-even trigger tier, '1', '2', '3' or 'WITHOUT'
        tps: Ordered take-profit tiers, may be empty
    """

    model_config = ConfigDict(frozen=True)

    symbol: StrictStr
    side: StrictStr
    entry: StrictStr
    stop: StrictStr
    size: StrictStr
    winrate: StrictStr
    strategy: StrictStr
    beTargetTrigger: StrictStr
    tps: Tuple[TakeProfitTier, ...]

    @field_validator("side")
    @classmethod
    def validate_side(cls, v: str) -> str:
        """Validate that side is either LONG or SHORT."""
        if v not in SIDES:
            raise ValueError("side must be either LONG or SHORT")
        return v

    @field_validator("beTargetTrigger")
    @classmethod
    def validate_be_target_trigger(cls, v: str) -> str:
        """Validate the break-even trigger against the allowed values."""
        if v not in BE_TARGET_TRIGGERS:
            raise ValueError("beTargetTrigger must be one of 1, 2, 3 or WITHOUT")
        return v

    @field_validator("stop")
    @classmethod
    def validate_stop(cls, v: str) -> str:
        """Validate that stop is a numeric string."""
        try:
            _parse_number(v)
        except ValueError:
            raise ValueError("stop must be a numeric string")
        return v

    @field_validator("entry", "size")
    @classmethod
    def validate_positive(cls, v: str, info) -> str:
        """Validate that entry and size are positive numeric strings."""
        try:
            number = _parse_number(v)
        except ValueError:
            raise ValueError(f"{info.field_name} must be a numeric string")
        if number <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v
