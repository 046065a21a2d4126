"""
PURPOSE: Alert module for BingX Relay, validates and normalizes inbound TradingView alerts.
"""

from .normalizer import is_valid_alert, normalize_alert, normalize_symbol, validate_alert
from .schema import Alert, TakeProfitTier, parse_investment

__all__ = [
    "Alert",
    "TakeProfitTier",
    "is_valid_alert",
    "normalize_alert",
    "normalize_symbol",
    "parse_investment",
    "validate_alert",
]
