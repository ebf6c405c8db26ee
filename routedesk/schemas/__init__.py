"""
Pydantic schemas for API request/response validation.
"""

from routedesk.schemas.base import BaseSchema
from routedesk.schemas.order import (
    OrderResponse,
    OrderListResponse,
    PendingOrdersResponse,
)
from routedesk.schemas.driver import (
    DriverResponse,
    DriverListResponse,
)
from routedesk.schemas.route import (
    RouteStopResponse,
    RouteAssign,
    RouteResponse,
    RouteListResponse,
    AssignmentResponse,
    RouteStatusUpdate,
    RouteStopUpdate,
)

__all__ = [
    # Base
    "BaseSchema",
    # Order
    "OrderResponse",
    "OrderListResponse",
    "PendingOrdersResponse",
    # Driver
    "DriverResponse",
    "DriverListResponse",
    # Route
    "RouteStopResponse",
    "RouteAssign",
    "RouteResponse",
    "RouteListResponse",
    "AssignmentResponse",
    "RouteStatusUpdate",
    "RouteStopUpdate",
]
