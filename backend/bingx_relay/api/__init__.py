"""
PURPOSE: API router initialization and exports for BingX Relay.
"""

from fastapi import APIRouter

from bingx_relay.api.routes_webhook import router as webhook_router

api_router = APIRouter()
api_router.include_router(webhook_router, tags=["webhook"])

__all__ = ["api_router"]
