"""
PURPOSE: Tests for the FastAPI application and the TradingView webhook route.

Tests the HTTP surface end to end with a mocked BingX transport:
- Accepted alerts and the success envelope
- HTTP 400 for non-JSON or malformed alerts, with no exchange call
- Error mapping for missing credentials and exchange failures
- Startup health check wiring
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from bingx_relay import __version__
from bingx_relay.core.errors import HealthCheckError
from bingx_relay.main import create_app
from conftest import form_fields, ok_response


@pytest.fixture
def transport(make_transport):
    return make_transport()


@pytest.fixture
def client(test_settings, transport):
    with TestClient(create_app(test_settings, transport)) as test_client:
        yield test_client


class TestRoot:
    """Test the availability endpoint."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "BingX Relay", "version": __version__}


class TestWebhook:
    """Test POST /webhook."""

    def test_valid_alert(self, client, transport, alert_payload):
        """Test that a valid alert is placed and echoed back normalized."""
        response = client.post("/webhook", json=alert_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Webhook received!"
        assert body["data"]["alert"]["symbol"] == "BTC-USDT"
        assert len(body["data"]["orders"]) == 3
        assert body["data"]["orders"][0]["success"] is True
        assert transport.call_count == 3

    def test_recv_window_from_settings(self, test_settings, transport, alert_payload):
        settings = test_settings.model_copy(update={"RECV_WINDOW_MS": 8000})
        with TestClient(create_app(settings, transport)) as test_client:
            test_client.post("/webhook", json=alert_payload)
        assert form_fields(transport.requests[0])["recvWindow"] == ["8000"]

    def test_invalid_alert(self, client, transport, alert_payload):
        """Test that a malformed alert returns 400 and never reaches BingX."""
        alert_payload["side"] = "MID"
        response = client.post("/webhook", json=alert_payload)

        assert response.status_code == 400
        assert response.json() == {
            "status": "error",
            "message": "Invalid webhook data format",
            "data": None,
        }
        assert transport.call_count == 0

    def test_non_json_body(self, client, transport):
        response = client.post(
            "/webhook", content=b"BTCUSDT buy", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid webhook data format"
        assert transport.call_count == 0

    def test_json_array_body(self, client, transport):
        response = client.post("/webhook", json=[1, 2])
        assert response.status_code == 400
        assert transport.call_count == 0

    def test_exchange_failure(self, test_settings, make_transport, alert_payload):
        """Test that an exchange HTTP error maps to 502 with the BingX message."""
        transport = make_transport(
            lambda request: httpx.Response(400, json={"code": 101204, "msg": "Insufficient margin"})
        )
        with TestClient(create_app(test_settings, transport)) as test_client:
            response = test_client.post("/webhook", json=alert_payload)

        assert response.status_code == 502
        body = response.json()
        assert body["status"] == "error"
        assert body["message"] == "BingX API Error: Insufficient margin | Status: 400 | Code: 101204"
        assert transport.call_count == 1

    def test_missing_credentials(self, test_settings, transport, alert_payload):
        """Test that missing credentials map to 500 without any exchange call."""
        settings = test_settings.model_copy(update={"BINGX_API_KEY": "", "BINGX_API_SECRET": ""})
        with TestClient(create_app(settings, transport)) as test_client:
            response = test_client.post("/webhook", json=alert_payload)

        assert response.status_code == 500
        assert response.json()["status"] == "error"
        assert transport.call_count == 0


class TestStartupHealthCheck:
    """Test the lifespan health check."""

    def test_health_check_passes(self, test_settings, make_transport):
        transport = make_transport(lambda request: ok_response([{"asset": "USDT", "balance": "50"}]))
        settings = test_settings.model_copy(update={"STARTUP_HEALTH_CHECK": True})
        with TestClient(create_app(settings, transport)) as test_client:
            assert test_client.get("/").status_code == 200
        assert transport.call_count == 2

    def test_health_check_failure_aborts_startup(self, test_settings, make_transport):
        transport = make_transport(lambda request: ok_response([{"asset": "USDT", "balance": "0"}]))
        settings = test_settings.model_copy(update={"STARTUP_HEALTH_CHECK": True})
        with pytest.raises(HealthCheckError):
            with TestClient(create_app(settings, transport)):
                pass
