"""
PURPOSE: Canonical parameter serialization and HMAC-SHA256 signing for BingX.

BingX recomputes the signature over the exact string the client signed, so the
serialization is deterministic: keys sorted ascending, values percent-encoded
like JavaScript's encodeURIComponent, list values repeated as key=v1&key=v2.

CALLED BY:
    - exchange/client.py (BingXClient.request)
"""

import hashlib
import hmac
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from bingx_relay.utils.math_utils import format_number

# encodeURIComponent leaves these unescaped on top of quote()'s own "-_.~"
_COMPONENT_SAFE = "!*'()"

# Methods whose parameters travel in the query string
QUERY_METHODS = ("GET", "DELETE")


@dataclass(frozen=True)
class SignedRequest:
    """
    PURPOSE: Result of signing one private request.

    Attributes:
        params: Parameters that were signed, timestamp included.
        query_string: Canonical serialization of params (the signing input).
        signature: Hex HMAC-SHA256 of query_string.
    """

    params: Dict[str, Any]
    query_string: str
    signature: str

    def signed_query(self) -> str:
        """Query string with the signature appended, for GET and DELETE."""
        return f"{self.query_string}&signature={self.signature}"

    def signed_body(self) -> str:
        """Form-encoded body with the URL-encoded signature appended, for POST and PUT."""
        return f"{self.query_string}&signature={encode_component(self.signature)}"


def encode_component(value: str) -> str:
    """Percent-encode value the way JavaScript's encodeURIComponent does."""
    return quote(value, safe=_COMPONENT_SAFE)


def build_query_string(params: Mapping[str, Any]) -> str:
    """
    PURPOSE: Serialize parameters into the canonical signing string.

    Args:
        params: Parameter name to scalar or list of scalars. None values
                are skipped.

    Returns:
        str: "k1=v1&k2=v2" with keys sorted ascending and values encoded.

    Example:
        >>> build_query_string({"symbol": "BTC-USDT", "ids": [2, 1], "recvWindow": 5000})
        'ids=2&ids=1&recvWindow=5000&symbol=BTC-USDT'
    """
    pairs: List[str] = []
    for key in sorted(params):
        value = params[key]
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        encoded_key = encode_component(str(key))
        for item in values:
            if item is None:
                continue
            pairs.append(f"{encoded_key}={encode_component(format_number(item))}")
    return "&".join(pairs)


def generate_signature(secret: str, payload: str) -> str:
    """
    PURPOSE: Compute the hex HMAC-SHA256 of payload keyed by the API secret.

    Args:
        secret: BingX API secret.
        payload: Canonical query string.

    Returns:
        str: Lower-case hex digest.
    """
    return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def sign_params(
    method: str,
    params: Optional[Mapping[str, Any]],
    data: Optional[Mapping[str, Any]],
    secret: str,
    timestamp: int,
) -> SignedRequest:
    """
    PURPOSE: Sign the natural parameter source of a request.

    GET and DELETE sign their query parameters, POST and PUT their body
    fields. A timestamp (milliseconds since epoch) is added before signing and
    replaces any timestamp already present.

    CALLED BY: BingXClient.request()

    Args:
        method: HTTP method, upper-case.
        params: Query parameters.
        data: Body fields.
        secret: BingX API secret.
        timestamp: Send-time timestamp in milliseconds.

    Returns:
        SignedRequest: Signed parameters, canonical string and signature.
    """
    source = params if method in QUERY_METHODS else data
    signed_params: Dict[str, Any] = {**(source or {}), "timestamp": timestamp}
    query_string = build_query_string(signed_params)
    return SignedRequest(
        params=signed_params,
        query_string=query_string,
        signature=generate_signature(secret, query_string),
    )
