"""
SQLAlchemy ORM Models for RouteDesk.

This module exports all domain models and enums.
"""

# Enums
from routedesk.models.enums import (
    OrderStatus,
    RouteStatus,
    StopStatus,
    DriverStatus,
)

# Base
from routedesk.models.base import BaseModel, TimestampMixin, UUIDPrimaryKeyMixin

# Domain Models
from routedesk.models.order import Order
from routedesk.models.driver import Driver
from routedesk.models.route import Route, RouteStop

__all__ = [
    # Enums
    "OrderStatus",
    "RouteStatus",
    "StopStatus",
    "DriverStatus",
    # Base
    "BaseModel",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Domain Models
    "Order",
    "Driver",
    "Route",
    "RouteStop",
]
