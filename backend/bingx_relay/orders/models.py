"""
Order Pydantic schemas for BingX Relay.

Handles the order payloads sent to the BingX perpetual swap order endpoint and
the take-profit / stop-loss legs that BingX expects as JSON-encoded strings
inside those payloads.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from bingx_relay.utils.math_utils import compact_number

MARK_PRICE = "MARK_PRICE"

# Leg types
STOP_MARKET = "STOP_MARKET"
TAKE_PROFIT = "TAKE_PROFIT"
TAKE_PROFIT_MARKET = "TAKE_PROFIT_MARKET"

# Order types
MARKET = "MARKET"
LIMIT = "LIMIT"

DEFAULT_RECV_WINDOW_MS = 5000


class OrderLeg(BaseModel):
    """
    Schema for a take-profit or stop-loss leg attached to an order.

    Attributes:
        type: Leg type, e.g. 'STOP_MARKET', 'TAKE_PROFIT', 'TAKE_PROFIT_MARKET'
        stopPrice: Trigger price
        price: Order price once triggered
        workingType: Price used to trigger the leg
        quantity: Quantity in base asset, absent for full-position legs
    """

    model_config = ConfigDict(frozen=True)

    type: str
    stopPrice: Optional[float] = None
    price: Optional[float] = None
    workingType: Optional[str] = MARK_PRICE
    quantity: Optional[float] = None

    def to_json(self) -> str:
        """Render the leg as compact JSON in field order, omitting absent fields."""
        body = {
            key: compact_number(value)
            for key, value in self.model_dump(exclude_none=True).items()
        }
        return json.dumps(body, separators=(",", ":"))


class OrderPayload(BaseModel):
    """
    Schema for one order sent to POST /openApi/swap/v2/trade/order.

    The request timestamp is absent; the signed client adds it
    when the request is sent.

    Attributes:
        symbol: BingX symbol (e.g. 'BTC-USDT')
        type: 'MARKET' or 'LIMIT'
        side: 'BUY' or 'SELL'
        positionSide: 'LONG' or 'SHORT'
        quantity: Order quantity in base asset
        price: Limit price, LIMIT orders only
        takeProfit: Embedded take-profit leg, primary order only
        stopLoss: Embedded stop-loss leg, primary order only
        recvWindow: Timestamp tolerance in milliseconds
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    type: str
    side: str
    positionSide: str
    quantity: float
    price: Optional[float] = None
    takeProfit: Optional[OrderLeg] = None
    stopLoss: Optional[OrderLeg] = None
    recvWindow: int = DEFAULT_RECV_WINDOW_MS

    def to_params(self) -> Dict[str, Any]:
        """
        PURPOSE: Flatten the payload into request parameters.

        Legs are JSON-encoded strings as BingX expects; unset fields are dropped.

        Returns:
            dict: Parameter name to scalar value.
        """
        params: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, OrderLeg):
                value = value.to_json()
            params[name] = value
        return params


class OrderPlan(BaseModel):
    """
    Schema for all orders derived from one alert.

    Attributes:
        primary: MARKET order opening the position with embedded legs
        secondary: LIMIT take-profit orders in tier order
        take_profits: Every processed take-profit leg, last one promoted to market
    """

    model_config = ConfigDict(frozen=True)

    primary: OrderPayload
    secondary: Tuple[OrderPayload, ...] = ()
    take_profits: Tuple[OrderLeg, ...] = ()

    def orders(self) -> List[OrderPayload]:
        """Return the orders in submission order: primary first, then secondary."""
        return [self.primary, *self.secondary]
