"""
PURPOSE: BingX exchange module, signed REST client, response normalization and startup health check.
"""

from .models import ClientConfig, ExchangeResponse

__all__ = ["ClientConfig", "ExchangeResponse"]
