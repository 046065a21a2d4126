"""
PURPOSE: Startup health check against the BingX account.

Confirms that the configured credentials can sign requests and that the swap
account holds USDT before the webhook server starts accepting alerts, then
sends a sample order to the BingX order-test endpoint (nothing is placed).

CALLED BY:
    - main.py (lifespan startup, when STARTUP_HEALTH_CHECK is enabled)
"""

from typing import Any, Optional

from bingx_relay.core.errors import HealthCheckError
from bingx_relay.exchange.client import BingXClient
from bingx_relay.orders.models import (
    MARK_PRICE,
    MARKET,
    STOP_MARKET,
    TAKE_PROFIT_MARKET,
    OrderLeg,
    OrderPayload,
)
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)

QUOTE_ASSET = "USDT"

HEALTH_CHECK_FAILED_MSG = (
    "Something failed, check your credentials or make sure your account has enough funds to trade"
)

# Sample order validated by the order-test endpoint
TEST_ORDER = OrderPayload(
    symbol="BTC-USDT",
    type=MARKET,
    side="BUY",
    positionSide="LONG",
    quantity=5,
    takeProfit=OrderLeg(
        type=TAKE_PROFIT_MARKET, stopPrice=31968, price=31968, workingType=MARK_PRICE
    ),
    stopLoss=OrderLeg(type=STOP_MARKET, stopPrice=30000, price=30000, workingType=MARK_PRICE),
)


def _find_quote_balance(balances: Any) -> Optional[float]:
    """Return the USDT balance from a BingX balance list, or None if absent."""
    if not isinstance(balances, list):
        return None
    for account in balances:
        if isinstance(account, dict) and account.get("asset") == QUOTE_ASSET:
            try:
                return float(account.get("balance"))
            except (TypeError, ValueError):
                return None
    return None


async def check_account_balance(client: BingXClient) -> bool:
    """
    PURPOSE: Verify credentials and funds, then exercise the order-test endpoint.

    The order-test outcome is logged but does not fail the check; a missing or
    empty USDT balance, or any error on the way, does.

    Args:
        client: Shared BingX client.

    Returns:
        bool: True when the account holds a positive USDT balance.

    Raises:
        HealthCheckError: Credentials missing or rejected, request failure,
            or no positive USDT balance.
    """
    try:
        balance_response = await client.fetch_balance()
        balance = _find_quote_balance(balance_response.data)
        logger.info(
            "health_check_balance_fetched",
            success=balance_response.success,
            code=balance_response.code,
            usdt_balance=balance,
        )

        if balance is not None and balance > 0:
            test_response = await client.test_order(TEST_ORDER)
            if test_response.success:
                logger.info("health_check_order_test_succeeded", symbol=TEST_ORDER.symbol)
            else:
                logger.warning(
                    "health_check_order_test_failed",
                    symbol=TEST_ORDER.symbol,
                    code=test_response.code,
                    msg=test_response.msg,
                )
            return True
    except Exception as e:
        logger.error(
            "health_check_failed",
            error=str(e),
            exception_type=type(e).__name__,
        )
        raise HealthCheckError(HEALTH_CHECK_FAILED_MSG) from e

    logger.error("health_check_no_funds", asset=QUOTE_ASSET)
    raise HealthCheckError(HEALTH_CHECK_FAILED_MSG)
