"""
PURPOSE: Export configuration settings for BingX Relay.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
