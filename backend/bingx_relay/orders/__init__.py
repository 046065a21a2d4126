"""
PURPOSE: Order module for BingX Relay, plans and submits the orders derived from an alert.
"""

from .models import OrderLeg, OrderPayload, OrderPlan
from .planner import plan_orders

__all__ = ["OrderLeg", "OrderPayload", "OrderPlan", "plan_orders"]
