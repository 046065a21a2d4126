"""
BingX REST Client

PURPOSE: Authenticated HTTP client for the BingX perpetual swap REST API.
Uses httpx async client; private requests are HMAC-SHA256 signed.

Private request pipeline:
    credential pre-flight check → timestamp → canonical serialization →
    signature → submission → response normalization

No retries and no throttling: a failed call raises to the caller and the
only timeout is the fixed per-request timeout from ClientConfig.

CALLED BY:
    - orders/placement.py (submit_order)
    - exchange/health_check.py (fetch_balance, test_order)
    - main.py (lifespan creates and closes the shared client)
"""

import time
from typing import Any, Dict, Mapping, NoReturn, Optional

import httpx

from bingx_relay.core.errors import ConfigurationError, ExchangeTransportError
from bingx_relay.exchange.models import ClientConfig, ExchangeResponse
from bingx_relay.exchange.response import normalize_response
from bingx_relay.exchange.signing import QUERY_METHODS, sign_params
from bingx_relay.orders.models import OrderPayload
from bingx_relay.utils.logger import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-BX-APIKEY"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# Endpoints
BALANCE_PATH = "/openApi/swap/v3/user/balance"
ORDER_PATH = "/openApi/swap/v2/trade/order"
ORDER_TEST_PATH = "/openApi/swap/v2/trade/order/test"


class BingXClient:
    """
    PURPOSE: Send public and signed requests to BingX and normalize the responses.

    The configuration is immutable and the client holds no per-request state,
    so one instance is shared by all concurrent webhook tasks.

    Attributes:
        _config: Immutable key, secret, base URL and timeout
        _transport: Optional httpx transport (tests inject httpx.MockTransport)
        _client: Lazily created httpx.AsyncClient
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        PURPOSE: Initialize BingXClient with its configuration.

        Args:
            config: Immutable client configuration.
            transport: Optional httpx transport override.
        """
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BingXClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        """
        PURPOSE: Get or create the httpx async client.

        Returns:
            httpx.AsyncClient: Reusable HTTP client instance.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url.rstrip("/"),
                timeout=self._config.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if it was opened."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    @property
    def base_url(self) -> str:
        """Return the configured base URL."""
        return self._config.base_url

    # ════════════════════════════════════════════════════════════════
    # Request pipeline
    # ════════════════════════════════════════════════════════════════

    def _validate_private_request(self) -> None:
        """Raise ConfigurationError unless both API key and secret are set."""
        if not self._config.api_key or not self._config.api_secret:
            raise ConfigurationError("Missing API credentials for private request")

    def _raise_transport_error(self, error: httpx.HTTPError) -> NoReturn:
        """
        PURPOSE: Wrap an httpx failure with whatever BingX reported about it.

        Args:
            error: HTTP status or network error raised by httpx.

        Raises:
            ExchangeTransportError: Always.
        """
        status_code: Optional[int] = None
        exchange_code: Any = None
        exchange_msg: Optional[str] = None

        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            try:
                body = error.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                exchange_code = body.get("code")
                if body.get("msg"):
                    exchange_msg = str(body["msg"])

        message = " | ".join([
            f"BingX API Error: {exchange_msg or str(error) or type(error).__name__}",
            f"Status: {status_code or 'No status'}",
            f"Code: {exchange_code or 'No error code'}",
        ])

        logger.error(
            "bingx_request_failed",
            status_code=status_code,
            exchange_code=exchange_code,
            error=message,
            exception_type=type(error).__name__,
        )
        raise ExchangeTransportError(
            message,
            status_code=status_code,
            exchange_code=exchange_code,
            exchange_msg=exchange_msg,
        ) from error

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        private: bool = False,
    ) -> ExchangeResponse:
        """
        PURPOSE: Send one request to BingX and normalize its response.

        Private requests are signed over the query parameters (GET, DELETE)
        or body fields (POST, PUT) plus a fresh timestamp, and carry the API
        key in the X-BX-APIKEY header. GET/DELETE send "<query>&signature=..."
        in the URL; POST/PUT send the same string form-encoded as the body.
        Public requests send params as the query string and data as JSON.

        Args:
            method: HTTP method.
            path: Endpoint path, e.g. "/openApi/swap/v2/trade/order".
            params: Query parameters.
            data: Body fields.
            private: Sign the request and attach the API key.

        Returns:
            ExchangeResponse: Normalized response envelope.

        Raises:
            ConfigurationError: Private request without credentials (no I/O attempted).
            ExchangeTransportError: Non-2xx status or network failure.
        """
        method = method.upper()
        headers: Dict[str, str] = {}
        request_kwargs: Dict[str, Any] = {}
        url = path

        if private:
            self._validate_private_request()
            timestamp = int(time.time() * 1000)
            signed = sign_params(method, params, data, self._config.api_secret, timestamp)
            headers[API_KEY_HEADER] = self._config.api_key

            if method in QUERY_METHODS:
                url = f"{path}?{signed.signed_query()}"
            else:
                headers["Content-Type"] = FORM_CONTENT_TYPE
                request_kwargs["content"] = signed.signed_body()
        elif method == "GET":
            request_kwargs["params"] = {k: v for k, v in (params or {}).items() if v is not None}
        else:
            request_kwargs["json"] = dict(data or {})

        client = await self._get_client()
        try:
            response = await client.request(method, url, headers=headers, **request_kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._raise_transport_error(e)

        result = normalize_response(response.content)
        logger.info(
            "bingx_request_completed",
            method=method,
            path=path,
            private=private,
            status_code=response.status_code,
            code=result.code,
            success=result.success,
        )
        return result

    # ════════════════════════════════════════════════════════════════
    # HTTP helpers
    # ════════════════════════════════════════════════════════════════

    async def get(
        self, path: str, params: Optional[Mapping[str, Any]] = None, private: bool = False
    ) -> ExchangeResponse:
        return await self.request("GET", path, params=params, private=private)

    async def post(
        self, path: str, data: Optional[Mapping[str, Any]] = None, private: bool = True
    ) -> ExchangeResponse:
        return await self.request("POST", path, data=data, private=private)

    async def put(
        self, path: str, data: Optional[Mapping[str, Any]] = None, private: bool = True
    ) -> ExchangeResponse:
        return await self.request("PUT", path, data=data, private=private)

    async def delete(
        self, path: str, params: Optional[Mapping[str, Any]] = None, private: bool = True
    ) -> ExchangeResponse:
        return await self.request("DELETE", path, params=params, private=private)

    # ════════════════════════════════════════════════════════════════
    # BingX endpoints
    # ════════════════════════════════════════════════════════════════

    async def fetch_balance(self) -> ExchangeResponse:
        """Fetch the perpetual swap account balances (signed GET)."""
        return await self.get(BALANCE_PATH, private=True)

    async def submit_order(self, order: OrderPayload) -> ExchangeResponse:
        """
        PURPOSE: Place one order on BingX.

        Args:
            order: Planned order payload.

        Returns:
            ExchangeResponse: Normalized order response.
        """
        return await self.post(ORDER_PATH, order.to_params(), private=True)

    async def test_order(self, order: OrderPayload) -> ExchangeResponse:
        """Validate an order against the BingX test endpoint without placing it."""
        return await self.post(ORDER_TEST_PATH, order.to_params(), private=True)
