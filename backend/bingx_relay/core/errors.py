"""
PURPOSE: Exception taxonomy for BingX Relay.

Every failure the relay raises on purpose derives from RelayError so the
FastAPI exception handlers in bingx_relay.main can map it to a webhook
response. Nothing here is retried or recovered; already-submitted orders are
left for the operator to reconcile on the exchange.

CALLED BY:
    - alerts/normalizer.py (ShapeValidationError)
    - exchange/client.py (ConfigurationError, ExchangeTransportError)
    - exchange/health_check.py (HealthCheckError)
    - main.py (exception handlers)
"""

from typing import Any, Dict, List, Optional


class RelayError(Exception):
    """Base class for all errors raised by the relay."""


class ShapeValidationError(RelayError):
    """
    PURPOSE: Inbound alert failed the strict schema check.

    Attributes:
        errors: Pydantic error dicts describing every offending field.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors: List[Dict[str, Any]] = errors or []


class ConfigurationError(RelayError):
    """Raised before any network I/O when a private call has no API key or secret."""


class ExchangeTransportError(RelayError):
    """
    PURPOSE: HTTP or network failure while talking to the BingX REST API.

    The message follows the format
    "BingX API Error: <msg> | Status: <status> | Code: <code>" with
    placeholders when the exchange did not report a value.

    Attributes:
        status_code:   HTTP status of the failed response, or None on network errors.
        exchange_code: BingX error code from the response body, if any.
        exchange_msg:  BingX error message from the response body, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        exchange_code: Any = None,
        exchange_msg: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.exchange_code = exchange_code
        self.exchange_msg = exchange_msg


class HealthCheckError(RelayError):
    """Startup balance or order-test check failed; the server must not start."""
