"""
Order API endpoints.

Orders are read-only here; route assignment is the only writer of
order status in this service.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from routedesk.db.database import get_async_session
from routedesk.models import Order, OrderStatus
from routedesk.schemas.order import (
    OrderResponse,
    OrderListResponse,
    PendingOrderResponse,
    PendingOrdersResponse,
)
from routedesk.services.assignment import SqlOrderStore

router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[OrderStatus] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session),
):
    """
    List orders, newest first.

    - **status**: Filter by order status
    """
    query = select(Order)
    if status:
        query = query.where(Order.status == status)

    query = query.order_by(Order.created_at.desc())
    query = query.offset(skip).limit(limit)

    result = await session.execute(query)
    orders = result.scalars().all()

    count_query = select(func.count(Order.id))
    if status:
        count_query = count_query.where(Order.status == status)
    total = await session.scalar(count_query)

    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in orders],
        total=total or 0,
    )


@router.get("/pending", response_model=PendingOrdersResponse)
async def list_pending_orders(
    session: AsyncSession = Depends(get_async_session),
):
    """
    List orders that can be put on a new route.

    Returns the pending orders with a value summary for route planning.
    """
    orders = await SqlOrderStore(session).list_pending()

    return PendingOrdersResponse(
        total_pending=len(orders),
        total_value=sum((o.total_price for o in orders), Decimal("0")),
        items=[PendingOrderResponse.model_validate(o) for o in orders],
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    session: AsyncSession = Depends(get_async_session),
):
    """Get a specific order by ID."""
    result = await session.execute(
        select(Order).where(Order.id == order_id)
    )
    order = result.scalar_one_or_none()

    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    return OrderResponse.model_validate(order)
