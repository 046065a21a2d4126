"""
PURPOSE: TradingView webhook API route for BingX Relay.

Receives alert webhooks, validates and normalizes them, and places the
resulting orders on BingX through the shared signed client.

The body is read as raw JSON rather than as a FastAPI model parameter so that
a malformed alert is answered with HTTP 400 in the relay's own envelope
instead of FastAPI's built-in 422.

CALLED BY:
    - TradingView alert webhooks (POST /webhook)
"""

from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from bingx_relay.alerts.normalizer import normalize_alert
from bingx_relay.core.errors import ShapeValidationError
from bingx_relay.exchange.client import BingXClient
from bingx_relay.orders.placement import place_order
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])

INVALID_ALERT_MSG = "Invalid webhook data format"


def _invalid_alert_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"status": "error", "message": INVALID_ALERT_MSG, "data": None},
    )


def get_client(request: Request) -> BingXClient:
    """Return the BingX client created by the application lifespan."""
    return request.app.state.bingx_client


@router.post("")
async def tradingview_webhook(request: Request) -> Any:
    """
    PURPOSE: Receive a TradingView alert and submit its orders to BingX.

    On receipt the alert is:
      1. Parsed as JSON (HTTP 400 if the body is not JSON).
      2. Validated against the Alert schema (HTTP 400, no exchange call).
      3. Symbol-normalized to BingX format.
      4. Planned and submitted, primary order first.

    Args:
        request: FastAPI Request carrying the raw alert body.

    Returns:
        dict: {"status": "success", "message": "Webhook received!",
               "data": {"alert": {...}, "orders": [...]}}

    Raises:
        ConfigurationError: Missing credentials (HTTP 500 via exception handler).
        ExchangeTransportError: BingX call failed (HTTP 502 via exception handler).
    """
    try:
        raw = await request.json()
    except ValueError:
        logger.warning("webhook_body_not_json")
        return _invalid_alert_response()

    try:
        alert = normalize_alert(raw)
    except ShapeValidationError:
        return _invalid_alert_response()

    logger.info(
        "webhook_alert_received",
        symbol=alert.symbol,
        side=alert.side,
        strategy=alert.strategy,
        be_target_trigger=alert.beTargetTrigger,
    )

    settings = request.app.state.settings
    results = await place_order(alert, get_client(request), recv_window=settings.RECV_WINDOW_MS)

    data: Dict[str, Any] = {
        "alert": alert.model_dump(),
        "orders": [result.model_dump() for result in results],
    }
    return {"status": "success", "message": "Webhook received!", "data": data}
