"""
PURPOSE: Tests for alert validation and symbol normalization.

Tests the inbound alert boundary:
- Strict schema checks (missing fields, wrong types, disallowed values)
- TradingView → BingX symbol rewriting and its fallback chain
- Pass-through of every other field
"""

import pytest
from pydantic import ValidationError

from bingx_relay.alerts.normalizer import (
    is_valid_alert,
    normalize_alert,
    normalize_symbol,
    validate_alert,
)
from bingx_relay.alerts.schema import parse_investment
from bingx_relay.core.errors import ShapeValidationError


class TestValidateAlert:
    """Test the strict alert schema."""

    def test_valid_alert(self, alert_payload):
        """Test that a well-formed alert validates."""
        alert = validate_alert(alert_payload)
        assert alert.side == "LONG"
        assert alert.entry == "50000"
        assert len(alert.tps) == 3
        assert alert.tps[1].investment == "30%"

    def test_empty_tps_allowed(self, alert_payload):
        """Test that an alert without take-profit tiers is accepted."""
        alert_payload["tps"] = []
        assert validate_alert(alert_payload).tps == ()

    def test_missing_stop_rejected(self, alert_payload):
        """Test that a payload without stop is rejected."""
        del alert_payload["stop"]
        with pytest.raises(ShapeValidationError) as exc_info:
            validate_alert(alert_payload)
        assert any(err["loc"] == ("stop",) for err in exc_info.value.errors)

    def test_invalid_side_rejected(self, alert_payload):
        """Test that side outside LONG/SHORT is rejected."""
        alert_payload["side"] = "MID"
        assert is_valid_alert(alert_payload) is False

    def test_lowercase_side_rejected(self, alert_payload):
        """Test that side is not case-normalized."""
        alert_payload["side"] = "long"
        assert is_valid_alert(alert_payload) is False

    def test_numeric_tp_price_rejected(self, alert_payload):
        """Test that a tier price sent as a number is rejected, not coerced."""
        alert_payload["tps"][0]["price"] = 51000
        assert is_valid_alert(alert_payload) is False

    def test_numeric_entry_rejected(self, alert_payload):
        """Test that a scalar field sent as a number is rejected."""
        alert_payload["entry"] = 50000
        assert is_valid_alert(alert_payload) is False

    @pytest.mark.parametrize("trigger", ["1", "2", "3", "WITHOUT"])
    def test_be_target_trigger_allowed(self, alert_payload, trigger):
        """Test every allowed beTargetTrigger value."""
        alert_payload["beTargetTrigger"] = trigger
        assert is_valid_alert(alert_payload) is True

    @pytest.mark.parametrize("trigger", ["4", "without", 1])
    def test_be_target_trigger_rejected(self, alert_payload, trigger):
        """Test beTargetTrigger values outside the allowed set."""
        alert_payload["beTargetTrigger"] = trigger
        assert is_valid_alert(alert_payload) is False

    def test_tps_not_a_list_rejected(self, alert_payload):
        """Test that tps must be a list of tiers."""
        alert_payload["tps"] = {"price": "51000", "investment": "100%"}
        assert is_valid_alert(alert_payload) is False

    def test_tier_missing_investment_rejected(self, alert_payload):
        """Test that every tier needs both price and investment."""
        alert_payload["tps"].append({"price": "54000"})
        assert is_valid_alert(alert_payload) is False

    @pytest.mark.parametrize("investment", ["0%", "-5%", "120%", "abc"])
    def test_investment_out_of_range_rejected(self, alert_payload, investment):
        """Test that tier investment must be a percentage in (0, 100]."""
        alert_payload["tps"][0]["investment"] = investment
        assert is_valid_alert(alert_payload) is False

    def test_non_numeric_entry_rejected(self, alert_payload):
        """Test that numeric-string fields must parse as numbers."""
        alert_payload["entry"] = "fifty thousand"
        assert is_valid_alert(alert_payload) is False

    def test_zero_entry_rejected(self, alert_payload):
        """Test that entry must be positive (it divides the size)."""
        alert_payload["entry"] = "0"
        assert is_valid_alert(alert_payload) is False

    @pytest.mark.parametrize("raw", [None, [], "alert", 42])
    def test_non_object_rejected(self, raw):
        """Test that non-object bodies are rejected."""
        with pytest.raises(ShapeValidationError):
            validate_alert(raw)

    def test_extra_fields_ignored(self, alert_payload):
        """Test that unknown fields do not fail validation."""
        alert_payload["comment"] = "from pine"
        assert is_valid_alert(alert_payload) is True

    def test_alert_is_frozen(self, alert_payload):
        """Test that a validated alert cannot be mutated."""
        alert = validate_alert(alert_payload)
        with pytest.raises(ValidationError):
            alert.symbol = "ETHUSDT"


class TestNormalizeSymbol:
    """Test TradingView → BingX symbol conversion."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("BTCUSDT", "BTC-USDT"),
            ("ETHUSDT.P", "ETH-USDT"),
            ("ethusdt.p", "ETH-USDT"),
            ("BTCUSD", "BTC-USD"),
            ("BTCUSDC", "BTC-USDC"),
            ("ETHBTC", "ETH-BTC"),
            ("XRPUSDT", "XRP-USDT"),
            ("dogeusdt", "DOGE-USDT"),
        ],
    )
    def test_known_quote_assets(self, raw, expected):
        """Test splitting on the known quote assets."""
        assert normalize_symbol(raw) == expected

    def test_generic_quote_fallback(self):
        """Test the generic 3-4 character quote split for unknown quotes."""
        assert normalize_symbol("EURJPY") == "EUR-JPY"

    def test_unmatched_symbol_upper_cased(self):
        """Test that symbols matching no pattern come back upper-cased and unsplit."""
        assert normalize_symbol("1000pepeusdt") == "1000PEPEUSDT"
        assert normalize_symbol("btc") == "BTC"

    def test_trailing_newline_not_stripped(self):
        """Test that the .P suffix must end the string, not precede a newline."""
        assert normalize_symbol("BTCUSDT.P\n") == "BTCUSDT.P\n"

    def test_non_ascii_letters_not_matched(self):
        """Test that only ASCII letters split (the Kelvin sign is not a K)."""
        assert normalize_symbol("\u212aNCUSDT") == "\u212aNCUSDT"

    def test_already_dashed_symbol_unchanged(self):
        """Test that a BingX-style symbol passes through."""
        assert normalize_symbol("BTC-USDT") == "BTC-USDT"


class TestNormalizeAlert:
    """Test the combined validate + rewrite step."""

    def test_only_symbol_rewritten(self, alert_payload):
        """Test that symbol is rewritten and every other field passes through."""
        alert = normalize_alert(alert_payload)
        assert alert.symbol == "BTC-USDT"
        dumped = alert.model_dump()
        for key in ("side", "entry", "stop", "size", "winrate", "strategy", "beTargetTrigger"):
            assert dumped[key] == alert_payload[key]
        assert [dict(tp) for tp in dumped["tps"]] == alert_payload["tps"]

    def test_invalid_alert_raises(self, alert_payload):
        """Test that normalization validates first."""
        alert_payload["side"] = "MID"
        with pytest.raises(ShapeValidationError):
            normalize_alert(alert_payload)


class TestParseInvestment:
    """Test investment percentage parsing."""

    def test_with_and_without_percent(self):
        assert parse_investment("50%") == 50.0
        assert parse_investment("12.5") == 12.5

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_investment("half")
