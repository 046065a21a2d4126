"""
PURPOSE: TradingView alert validation and symbol normalization for BingX Relay.

Checks inbound webhook bodies against the strict Alert schema and rewrites the
instrument symbol from TradingView notation (BTCUSDT, ETHUSDT.P) to the BingX
dashed notation (BTC-USDT, ETH-USDT). All other fields pass through unchanged.

CALLED BY:
    - api/routes_webhook.py (POST /webhook)
"""

import re
from typing import Any

from pydantic import ValidationError

from bingx_relay.alerts.schema import Alert
from bingx_relay.core.errors import ShapeValidationError
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)

# Perpetual contract suffix TradingView appends to futures symbols
_PERP_SUFFIX = re.compile(r"\.P\Z", re.IGNORECASE | re.ASCII)

# Known quote assets, tried in this order
_KNOWN_QUOTE = re.compile(r"([A-Z]+)(USDT|BUSD|USD|USDC|BTC|ETH)", re.IGNORECASE | re.ASCII)

# Fallbacks when no known quote asset matched
_SHORT_BASE_QUOTE = re.compile(r"([A-Z]{3,4})(USDT|USD|BUSD|ETH|BTC)", re.IGNORECASE | re.ASCII)
_GENERIC_QUOTE = re.compile(r"([A-Z]+)([A-Z]{3,4})", re.IGNORECASE | re.ASCII)


def validate_alert(raw: Any) -> Alert:
    """
    PURPOSE: Validate a raw webhook body against the Alert schema.

    CALLED BY: normalize_alert(), is_valid_alert()

    Args:
        raw: Parsed JSON body of the webhook request.

    Returns:
        Alert: Frozen, validated alert.

    Raises:
        ShapeValidationError: If the body is not an object or any field is
            missing, mistyped or outside its allowed values.
    """
    if not isinstance(raw, dict):
        raise ShapeValidationError(
            "Invalid webhook data format",
            errors=[{"type": "dict_type", "loc": [], "msg": "Alert must be a JSON object"}],
        )

    try:
        return Alert.model_validate(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        logger.warning(
            "alert_validation_failed",
            error_count=len(errors),
            fields=[".".join(str(part) for part in err["loc"]) for err in errors],
        )
        raise ShapeValidationError("Invalid webhook data format", errors=errors) from e


def is_valid_alert(raw: Any) -> bool:
    """Return True when raw passes validate_alert()."""
    try:
        validate_alert(raw)
    except ShapeValidationError:
        return False
    return True


def normalize_symbol(symbol: str) -> str:
    """
    PURPOSE: Convert a TradingView symbol string to BingX dashed format.

    Strips a trailing ".P" (any case), then splits base and quote using the
    known quote assets first, a 3-4 character base fallback next, and a
    generic 3-4 character quote split last. Symbols that match none of these
    are returned upper-cased without a separator.

    CALLED BY: normalize_alert()

    Args:
        symbol: Raw symbol from TradingView.

    Returns:
        str: BingX symbol string.

    Examples:
        "BTCUSDT"      → "BTC-USDT"
        "ETHUSDT.P"    → "ETH-USDT"
        "BTCUSD"       → "BTC-USD"
        "1000pepeusdt" → "1000PEPEUSDT"
    """
    clean = _PERP_SUFFIX.sub("", symbol)

    match = _KNOWN_QUOTE.fullmatch(clean)
    if match:
        base, quote = match.groups()
        return f"{base.upper()}-{quote.upper()}"

    match = _SHORT_BASE_QUOTE.fullmatch(clean) or _GENERIC_QUOTE.fullmatch(clean)
    if match:
        base, quote = match.groups()
        return f"{base.upper()}-{quote.upper()}"

    return clean.upper()


def normalize_alert(raw: Any) -> Alert:
    """
    PURPOSE: Validate a raw alert and rewrite its symbol to BingX format.

    CALLED BY: POST /webhook route handler

    Args:
        raw: Parsed JSON body of the webhook request.

    Returns:
        Alert: New frozen alert identical to the input except for symbol.

    Raises:
        ShapeValidationError: If the body fails validation.
    """
    alert = validate_alert(raw)
    symbol = normalize_symbol(alert.symbol)

    logger.info(
        "alert_normalized",
        symbol_raw=alert.symbol,
        symbol=symbol,
        side=alert.side,
        strategy=alert.strategy,
        tp_count=len(alert.tps),
    )

    return alert.model_copy(update={"symbol": symbol})
