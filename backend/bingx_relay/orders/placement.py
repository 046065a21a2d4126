"""
PURPOSE: Submit the orders planned for one alert to BingX.

Orders go out one at a time in plan order (primary first), each awaited
before the next. There is no atomicity across them: if a secondary LIMIT
order fails after the primary succeeded, the exception propagates, the
remaining secondary orders are skipped and the primary stays live.

CALLED BY:
    - api/routes_webhook.py (POST /webhook)
"""

from typing import List

from bingx_relay.alerts.schema import Alert
from bingx_relay.exchange.client import BingXClient
from bingx_relay.exchange.models import ExchangeResponse
from bingx_relay.orders.models import DEFAULT_RECV_WINDOW_MS
from bingx_relay.orders.planner import plan_orders
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)


async def place_order(
    alert: Alert,
    client: BingXClient,
    recv_window: int = DEFAULT_RECV_WINDOW_MS,
) -> List[ExchangeResponse]:
    """
    PURPOSE: Plan and submit every order for a normalized alert.

    Args:
        alert: Validated alert with a BingX symbol.
        client: Shared BingX client.
        recv_window: Timestamp tolerance attached to each order, in milliseconds.

    Returns:
        list[ExchangeResponse]: One response per submitted order, in plan order.

    Raises:
        ConfigurationError: Credentials missing (raised before the first order).
        ExchangeTransportError: A submission failed; later orders were not sent.
    """
    plan = plan_orders(alert, recv_window=recv_window)
    results: List[ExchangeResponse] = []

    for index, order in enumerate(plan.orders()):
        response = await client.submit_order(order)
        results.append(response)
        logger.info(
            "order_submitted",
            symbol=order.symbol,
            order_type=order.type,
            side=order.side,
            position_side=order.positionSide,
            quantity=order.quantity,
            position=index,
            success=response.success,
            code=response.code,
            msg=response.msg,
        )

    return results
