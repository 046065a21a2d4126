"""
PURPOSE: BingX Relay, a TradingView alert to BingX perpetual swap order bridge.

Receives webhook alerts, validates and normalizes them, plans the primary and
take-profit orders and submits them through an HMAC-signed BingX REST client.
"""

__version__ = "1.0.0"
