"""
SQLAlchemy collaborators for route assignment.

All three share the request's ``AsyncSession``. Writes are flushed
immediately so integrity errors surface at the step that caused them;
committing is left to the session owner.
"""
from collections.abc import Sequence
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from routedesk.models import Driver, DriverStatus, Order, OrderStatus, Route, RouteStop
from routedesk.services.assignment.exceptions import ConstraintViolation, StorageError
from routedesk.services.assignment.stores import DriverDirectory, OrderStore, RouteRepository
from routedesk.services.assignment.types import OrderSnapshot, RouteAttributes, StopDraft


def _order_snapshot(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        id=order.id,
        status=order.status,
        customer_name=order.customer_name,
        address=order.address,
        total_price=order.total_price,
    )


def _stop_draft(stop: RouteStop) -> StopDraft:
    return StopDraft(
        route_id=stop.route_id,
        order_id=stop.order_id,
        stop_number=stop.stop_number,
        status=stop.status,
        estimated_arrival_time=stop.estimated_arrival_time,
        is_open=stop.is_open,
    )


def _route_values(attrs: RouteAttributes) -> dict:
    values = {
        "name": attrs.name,
        "driver_id": attrs.driver_id,
        "start_address": attrs.start_address,
        "estimated_completion_time": attrs.estimated_completion_time,
        "notes": attrs.notes,
    }
    # No status leaves the column (or its default) untouched
    if attrs.status is not None:
        values["status"] = attrs.status
    return values


class SqlOrderStore(OrderStore):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_pending(self) -> list[OrderSnapshot]:
        result = await self.session.execute(
            select(Order)
            .where(Order.status == OrderStatus.PENDING)
            .order_by(Order.created_at.desc())
        )
        return [_order_snapshot(o) for o in result.scalars().all()]

    async def get_many(self, order_ids: Sequence[int]) -> dict[int, OrderSnapshot]:
        if not order_ids:
            return {}
        result = await self.session.execute(
            select(Order).where(Order.id.in_(list(order_ids)))
        )
        return {o.id: _order_snapshot(o) for o in result.scalars().all()}

    async def set_status(self, order_id: int, status: OrderStatus) -> None:
        result = await self.session.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(status=status)
        )
        if result.rowcount == 0:
            raise StorageError(f"Order {order_id} does not exist")


class SqlRouteRepository(RouteRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_route(self, attrs: RouteAttributes) -> UUID:
        route = Route(**_route_values(attrs))
        self.session.add(route)
        await self._flush()
        return route.id

    async def update_route(self, route_id: UUID, attrs: RouteAttributes) -> None:
        result = await self.session.execute(
            update(Route)
            .where(Route.id == route_id)
            .values(**_route_values(attrs))
        )
        if result.rowcount == 0:
            raise StorageError(f"Route {route_id} does not exist")

    async def get_route(self, route_id: UUID) -> Optional[RouteAttributes]:
        result = await self.session.execute(
            select(Route).where(Route.id == route_id)
        )
        route = result.scalar_one_or_none()
        if route is None:
            return None
        return RouteAttributes(
            name=route.name,
            driver_id=route.driver_id,
            start_address=route.start_address,
            status=route.status,
            estimated_completion_time=route.estimated_completion_time,
            notes=route.notes,
        )

    async def delete_stops(self, route_id: UUID) -> int:
        result = await self.session.execute(
            delete(RouteStop).where(RouteStop.route_id == route_id)
        )
        return result.rowcount

    async def insert_stops(self, stops: Sequence[StopDraft]) -> None:
        self.session.add_all([
            RouteStop(
                route_id=stop.route_id,
                order_id=stop.order_id,
                stop_number=stop.stop_number,
                status=stop.status,
                estimated_arrival_time=stop.estimated_arrival_time,
                is_open=stop.is_open,
            )
            for stop in stops
        ])
        await self._flush()

    async def list_stops(self, route_id: UUID) -> list[StopDraft]:
        result = await self.session.execute(
            select(RouteStop)
            .where(RouteStop.route_id == route_id)
            .order_by(RouteStop.stop_number)
        )
        return [_stop_draft(s) for s in result.scalars().all()]

    async def routes_for_orders(self, order_ids: Sequence[int]) -> dict[int, UUID]:
        if not order_ids:
            return {}
        result = await self.session.execute(
            select(RouteStop.order_id, RouteStop.route_id)
            .where(
                RouteStop.order_id.in_(list(order_ids)),
                RouteStop.is_open.is_(True),
            )
        )
        return {row.order_id: row.route_id for row in result.all()}

    async def close_stops(self, route_id: UUID) -> int:
        result = await self.session.execute(
            update(RouteStop)
            .where(RouteStop.route_id == route_id, RouteStop.is_open.is_(True))
            .values(is_open=False)
        )
        return result.rowcount

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        # SAVEPOINT, so the caller's outer transaction stays usable
        async with self.session.begin_nested():
            yield

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise ConstraintViolation(str(exc.orig)) from exc


class SqlDriverDirectory(DriverDirectory):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, driver_id: UUID) -> bool:
        return await self._duty(driver_id) is not None

    async def is_eligible(self, driver_id: UUID) -> bool:
        duty = await self._duty(driver_id)
        if duty is None:
            return False
        is_active, driver_status = duty
        return is_active and driver_status == DriverStatus.ACTIVE

    async def _duty(self, driver_id: UUID) -> Optional[tuple[bool, DriverStatus]]:
        """Only the columns eligibility needs; no relationship loading."""
        result = await self.session.execute(
            select(Driver.is_active, Driver.driver_status).where(Driver.id == driver_id)
        )
        row = result.first()
        return None if row is None else (row.is_active, row.driver_status)
