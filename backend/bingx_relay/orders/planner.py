"""
PURPOSE: Translate a normalized alert into BingX order payloads.

Pure computation, no I/O. The position is opened with one MARKET order that
carries the stop-loss and the final take-profit as embedded legs; every
earlier take-profit tier becomes its own LIMIT order.

Quantities are IEEE-754 doubles computed with plain float division, so
total = size / entry and each tier quantity = total * (investment / 100).

CALLED BY:
    - orders/placement.py (place_order)
"""

from typing import List, Optional

from bingx_relay.alerts.schema import Alert, parse_investment
from bingx_relay.orders.models import (
    DEFAULT_RECV_WINDOW_MS,
    LIMIT,
    MARK_PRICE,
    MARKET,
    STOP_MARKET,
    TAKE_PROFIT,
    TAKE_PROFIT_MARKET,
    OrderLeg,
    OrderPayload,
    OrderPlan,
)
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)

FULL_ALLOCATION_PCT = 100.0


def order_side(position_side: str) -> str:
    """Map a LONG/SHORT position side to the BUY/SELL order side that opens it."""
    return "BUY" if position_side == "LONG" else "SELL"


def build_take_profits(alert: Alert, total_size: float) -> List[OrderLeg]:
    """
    PURPOSE: Turn the alert's take-profit tiers into order legs.

    A first tier worth exactly 100% wins outright: one TAKE_PROFIT_MARKET leg
    without a quantity, all other tiers ignored. Otherwise tiers are walked in
    order, accumulating their investment until 100% is reached. A tier that
    would overshoot is clamped to the remainder, tiers after the 100% mark are
    dropped, and the last processed leg is promoted to TAKE_PROFIT_MARKET.
    Allocations that never reach 100% are accepted as they are.

    Args:
        alert: Validated alert.
        total_size: Total position size in base asset.

    Returns:
        list[OrderLeg]: Legs in tier order; empty when the alert has no tiers.

    Example:
        Tiers [60%, 60%] produce quantities [0.6, 0.4] * total_size and the
        second leg is promoted.
    """
    if not alert.tps:
        return []

    first = alert.tps[0]
    if parse_investment(first.investment) == FULL_ALLOCATION_PCT:
        tp_price = float(first.price)
        return [
            OrderLeg(
                type=TAKE_PROFIT_MARKET,
                stopPrice=tp_price,
                price=tp_price,
                workingType=MARK_PRICE,
            )
        ]

    legs: List[OrderLeg] = []
    cumulative = 0.0
    for tier in alert.tps:
        if cumulative >= FULL_ALLOCATION_PCT:
            break
        investment = parse_investment(tier.investment)
        if cumulative + investment > FULL_ALLOCATION_PCT:
            investment = FULL_ALLOCATION_PCT - cumulative
        cumulative += investment

        tp_price = float(tier.price)
        legs.append(
            OrderLeg(
                type=TAKE_PROFIT,
                stopPrice=tp_price,
                price=tp_price,
                workingType=MARK_PRICE,
                quantity=total_size * (investment / 100),
            )
        )

    if cumulative < FULL_ALLOCATION_PCT:
        logger.warning(
            "take_profit_allocation_incomplete",
            symbol=alert.symbol,
            allocated_pct=cumulative,
        )

    legs[-1] = legs[-1].model_copy(update={"type": TAKE_PROFIT_MARKET})
    return legs


def build_stop_loss(alert: Alert) -> OrderLeg:
    """Build the STOP_MARKET leg triggered on mark price at the alert's stop."""
    stop_price = float(alert.stop)
    return OrderLeg(
        type=STOP_MARKET,
        stopPrice=stop_price,
        price=stop_price,
        workingType=MARK_PRICE,
    )


def plan_orders(alert: Alert, recv_window: int = DEFAULT_RECV_WINDOW_MS) -> OrderPlan:
    """
    PURPOSE: Compute every order to submit for one alert.

    CALLED BY: place_order()

    Args:
        alert: Validated alert whose symbol is already in BingX format.
        recv_window: Timestamp tolerance attached to each order, in milliseconds.

    Returns:
        OrderPlan: Primary MARKET order with embedded stop-loss and final
            take-profit, followed by LIMIT orders for the earlier tiers.
    """
    total_size = float(alert.size) / float(alert.entry)
    side = order_side(alert.side)

    take_profits = build_take_profits(alert, total_size)
    main_take_profit: Optional[OrderLeg] = take_profits[-1] if take_profits else None

    primary = OrderPayload(
        symbol=alert.symbol,
        type=MARKET,
        side=side,
        positionSide=alert.side,
        quantity=total_size,
        takeProfit=main_take_profit,
        stopLoss=build_stop_loss(alert),
        recvWindow=recv_window,
    )

    secondary = tuple(
        OrderPayload(
            symbol=alert.symbol,
            type=LIMIT,
            side=side,
            positionSide=alert.side,
            quantity=leg.quantity,
            price=leg.price,
            recvWindow=recv_window,
        )
        for leg in take_profits[:-1]
    )

    logger.info(
        "order_plan_built",
        symbol=alert.symbol,
        side=side,
        quantity=total_size,
        take_profit_count=len(take_profits),
        limit_order_count=len(secondary),
    )

    return OrderPlan(primary=primary, secondary=secondary, take_profits=tuple(take_profits))
