"""
Order Pydantic schemas.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from routedesk.models.enums import OrderStatus
from routedesk.schemas.base import BaseSchema


class OrderResponse(BaseSchema):
    """Schema for order response."""
    id: int
    status: OrderStatus
    customer_name: Optional[str]
    address: str
    total_price: Decimal
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class OrderListResponse(BaseSchema):
    """Schema for list of orders."""
    items: list[OrderResponse]
    total: int


class PendingOrderResponse(BaseSchema):
    """An order in the route-building pool."""
    id: int
    status: OrderStatus
    customer_name: Optional[str] = None
    address: str
    total_price: Decimal


class PendingOrdersResponse(BaseSchema):
    """Orders available for route building."""
    total_pending: int
    total_value: Decimal
    items: list[PendingOrderResponse]
