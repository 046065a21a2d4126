"""
PURPOSE: Pytest fixtures for BingX Relay tests.

Provides shared test data and mock objects including:
- A valid TradingView alert payload
- Client configuration with test credentials
- A recording httpx.MockTransport standing in for the BingX REST API
- Test settings with the startup health check disabled
"""

import json
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest

from bingx_relay.config.settings import Settings
from bingx_relay.exchange.client import BingXClient
from bingx_relay.exchange.models import ClientConfig

TEST_API_KEY = "test-api-key"
TEST_API_SECRET = "test-api-secret"
TEST_BASE_URL = "https://bingx.test"


class RecordingTransport(httpx.MockTransport):
    """
    PURPOSE: MockTransport that records every request it serves.

    Attributes:
        requests: Requests in the order they were sent.
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def call_count(self) -> int:
        return len(self.requests)


def ok_response(data: Any = None, code: int = 0, msg: str = "") -> httpx.Response:
    """Build a 200 BingX response carrying data."""
    return httpx.Response(200, json={"code": code, "msg": msg, "data": data})


@pytest.fixture
def alert_payload() -> Dict[str, Any]:
    """
    PURPOSE: Valid TradingView alert with three take-profit tiers summing to 100%.

    Returns:
        dict: Raw webhook body.
    """
    return {
        "symbol": "BTCUSDT.P",
        "side": "LONG",
        "entry": "50000",
        "stop": "48000",
        "size": "1000",
        "winrate": "62%",
        "strategy": "breakout",
        "beTargetTrigger": "1",
        "tps": [
            {"price": "51000", "investment": "50%"},
            {"price": "52000", "investment": "30%"},
            {"price": "53000", "investment": "20%"},
        ],
    }


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration with test credentials."""
    return ClientConfig(
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        base_url=TEST_BASE_URL,
        timeout=5.0,
    )


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """
    PURPOSE: Factory for recording transports.

    Without a handler every request is answered with a successful order
    response.

    Returns:
        Callable: make_transport(handler=None) -> RecordingTransport
    """

    def _make(handler: Optional[Callable[[httpx.Request], httpx.Response]] = None) -> RecordingTransport:
        def _default(request: httpx.Request) -> httpx.Response:
            return ok_response({"order": {"orderId": 1735950529123455488}})

        return RecordingTransport(handler or _default)

    return _make


@pytest.fixture
def make_client(client_config: ClientConfig) -> Callable[..., BingXClient]:
    """Factory for BingXClient instances bound to a transport."""

    def _make(transport: httpx.AsyncBaseTransport, config: Optional[ClientConfig] = None) -> BingXClient:
        return BingXClient(config or client_config, transport=transport)

    return _make


@pytest.fixture
def test_settings() -> Settings:
    """
    PURPOSE: Settings override with test values.

    Returns:
        Settings: Test credentials, test base URL, health check disabled.
    """
    return Settings(
        BINGX_API_KEY=TEST_API_KEY,
        BINGX_API_SECRET=TEST_API_SECRET,
        BINGX_BASE_URL=TEST_BASE_URL,
        BINGX_TIMEOUT_SECONDS=5.0,
        RECV_WINDOW_MS=5000,
        LOG_LEVEL="WARNING",
        STARTUP_HEALTH_CHECK=False,
    )


def form_fields(request: httpx.Request) -> Dict[str, List[str]]:
    """Decode a form-encoded request body into a field → values mapping."""
    return parse_qs(request.content.decode("utf-8"), keep_blank_values=True)


def json_leg(value: str) -> Dict[str, Any]:
    """Decode a JSON-encoded order leg sent in a form field."""
    return json.loads(value)
