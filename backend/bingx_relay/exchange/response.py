"""
PURPOSE: Decode and normalize BingX REST responses.

BingX order and position identifiers exceed 2**53, so bodies are parsed with
the standard json module, which keeps JSON integers as arbitrary-precision
Python ints (prices and quantities stay floats). The takeProfit and stopLoss
fields of an echoed order arrive as JSON-encoded strings; they are decoded one
level deeper into plain dicts, exactly as sent, and left as strings when they
do not hold a JSON object.

CALLED BY:
    - exchange/client.py (BingXClient.request)
"""

import json
from typing import Any, Dict, Union

from bingx_relay.exchange.models import ExchangeResponse

# Either the decoded leg object or the original string when it could not be decoded
LegField = Union[Dict[str, Any], str]

_NESTED_LEG_FIELDS = ("takeProfit", "stopLoss")


def decode_leg(value: str) -> LegField:
    """
    PURPOSE: Decode a JSON-encoded order leg, falling back to the raw string.

    No fields are added, dropped or converted.

    Args:
        value: takeProfit / stopLoss string from an order echoed by BingX.

    Returns:
        dict | str: Decoded leg object, or value unchanged if it is not a JSON object.
    """
    try:
        leg = json.loads(value)
    except json.JSONDecodeError:
        return value
    return leg if isinstance(leg, dict) else value


def parse_body(text: Union[str, bytes]) -> Any:
    """
    PURPOSE: Parse a BingX response body, decoding nested order legs.

    Args:
        text: Raw response body.

    Returns:
        Any: Parsed JSON with data.order.takeProfit / stopLoss decoded when possible.

    Raises:
        ValueError: If the body is not valid JSON.
    """
    parsed = json.loads(text)

    data = parsed.get("data") if isinstance(parsed, dict) else None
    order = data.get("order") if isinstance(data, dict) else None
    if isinstance(order, dict):
        for field in _NESTED_LEG_FIELDS:
            if isinstance(order.get(field), str):
                order[field] = decode_leg(order[field])

    return parsed


def normalize_response(body: Any) -> ExchangeResponse:
    """
    PURPOSE: Normalize a BingX response into the {code, msg, data, success} envelope.

    success is True iff the body carries a data field (even null), whatever
    code BingX reported. code is BingX's own integer code when present,
    otherwise 0 on success and -1 on failure.

    CALLED BY: BingXClient.request()

    Args:
        body: Raw text/bytes or an already parsed body.

    Returns:
        ExchangeResponse: Normalized envelope. Never raises on malformed input.

    Examples:
        {"code": 0, "data": {...}} → success=True
        {"code": 0, "msg": ""}     → success=False
    """
    if isinstance(body, (str, bytes)):
        try:
            body = parse_body(body)
        except ValueError:
            raw = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
            return ExchangeResponse(code=-1, msg="Response parsing failed", data=raw, success=False)

    if not isinstance(body, dict):
        return ExchangeResponse(code=-1, msg="Invalid response format", data=body, success=False)

    parsed: Dict[str, Any] = body
    success = "data" in parsed

    raw_code = parsed.get("code")
    if isinstance(raw_code, int) and not isinstance(raw_code, bool):
        code = raw_code
    else:
        code = 0 if success else -1

    raw_msg = parsed.get("msg")
    msg = raw_msg if isinstance(raw_msg, str) else ""

    return ExchangeResponse(code=code, msg=msg, data=parsed.get("data"), success=success)
