"""
In-memory collaborators for route assignment.

All three stores share one ``InMemoryBackend`` so a transaction opened on
the route repository also covers order status writes. Storage rules match
the database schema: one open stop per order, unique stop numbers per route.
"""
import copy
from collections.abc import Iterable, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from typing import AsyncIterator, Optional
from uuid import UUID, uuid4

from routedesk.models.enums import DriverStatus, OrderStatus
from routedesk.services.assignment.exceptions import ConstraintViolation, StorageError
from routedesk.services.assignment.stores import DriverDirectory, OrderStore, RouteRepository
from routedesk.services.assignment.types import OrderSnapshot, RouteAttributes, StopDraft


@dataclass
class DriverRecord:
    id: UUID
    name: str = ""
    driver_status: DriverStatus = DriverStatus.ACTIVE
    is_active: bool = True


@dataclass
class InMemoryBackend:
    """Shared state for the in-memory stores."""
    orders: dict[int, OrderSnapshot] = field(default_factory=dict)
    routes: dict[UUID, RouteAttributes] = field(default_factory=dict)
    stops: dict[UUID, list[StopDraft]] = field(default_factory=dict)
    drivers: dict[UUID, DriverRecord] = field(default_factory=dict)

    def add_orders(self, orders: Iterable[OrderSnapshot]) -> None:
        for order in orders:
            self.orders[order.id] = order

    def add_driver(self, driver: DriverRecord) -> DriverRecord:
        self.drivers[driver.id] = driver
        return driver

    def snapshot(self) -> tuple:
        return copy.deepcopy((self.orders, self.routes, self.stops))

    def restore(self, state: tuple) -> None:
        self.orders, self.routes, self.stops = state


class InMemoryOrderStore(OrderStore):

    def __init__(self, backend: InMemoryBackend):
        self._backend = backend

    async def list_pending(self) -> list[OrderSnapshot]:
        pending = [o for o in self._backend.orders.values() if o.status == OrderStatus.PENDING]
        return sorted(pending, key=lambda o: o.id, reverse=True)

    async def get_many(self, order_ids: Sequence[int]) -> dict[int, OrderSnapshot]:
        orders = self._backend.orders
        return {oid: orders[oid] for oid in order_ids if oid in orders}

    async def set_status(self, order_id: int, status: OrderStatus) -> None:
        order = self._backend.orders.get(order_id)
        if order is None:
            raise StorageError(f"Order {order_id} does not exist")
        self._backend.orders[order_id] = replace(order, status=status)


class InMemoryRouteRepository(RouteRepository):

    def __init__(self, backend: InMemoryBackend):
        self._backend = backend

    async def create_route(self, attrs: RouteAttributes) -> UUID:
        route_id = uuid4()
        self._backend.routes[route_id] = attrs
        self._backend.stops[route_id] = []
        return route_id

    async def update_route(self, route_id: UUID, attrs: RouteAttributes) -> None:
        if route_id not in self._backend.routes:
            raise StorageError(f"Route {route_id} does not exist")
        self._backend.routes[route_id] = attrs

    async def get_route(self, route_id: UUID) -> Optional[RouteAttributes]:
        return self._backend.routes.get(route_id)

    async def delete_stops(self, route_id: UUID) -> int:
        removed = self._backend.stops.get(route_id, [])
        self._backend.stops[route_id] = []
        return len(removed)

    async def insert_stops(self, stops: Sequence[StopDraft]) -> None:
        taken_orders = {
            stop.order_id
            for route_stops in self._backend.stops.values()
            for stop in route_stops
            if stop.is_open
        }
        pending: dict[UUID, list[StopDraft]] = {}

        for stop in stops:
            if stop.route_id not in self._backend.routes:
                raise StorageError(f"Route {stop.route_id} does not exist")
            if stop.is_open and stop.order_id in taken_orders:
                raise ConstraintViolation(f"Order {stop.order_id} already has an open route stop")
            existing = self._backend.stops[stop.route_id] + pending.get(stop.route_id, [])
            if any(s.stop_number == stop.stop_number for s in existing):
                raise ConstraintViolation(
                    f"Stop number {stop.stop_number} already used on route {stop.route_id}"
                )
            if stop.is_open:
                taken_orders.add(stop.order_id)
            pending.setdefault(stop.route_id, []).append(stop)

        # Validate everything before writing so a rejected batch leaves no stops
        for route_id, new_stops in pending.items():
            self._backend.stops[route_id].extend(new_stops)

    async def list_stops(self, route_id: UUID) -> list[StopDraft]:
        return sorted(self._backend.stops.get(route_id, []), key=lambda s: s.stop_number)

    async def routes_for_orders(self, order_ids: Sequence[int]) -> dict[int, UUID]:
        wanted = set(order_ids)
        return {
            stop.order_id: route_id
            for route_id, route_stops in self._backend.stops.items()
            for stop in route_stops
            if stop.is_open and stop.order_id in wanted
        }

    async def close_stops(self, route_id: UUID) -> int:
        route_stops = self._backend.stops.get(route_id)
        if not route_stops:
            return 0
        self._backend.stops[route_id] = [replace(s, is_open=False) for s in route_stops]
        return sum(1 for s in route_stops if s.is_open)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        state = self._backend.snapshot()
        try:
            yield
        except BaseException:
            self._backend.restore(state)
            raise


class InMemoryDriverDirectory(DriverDirectory):

    def __init__(self, backend: InMemoryBackend):
        self._backend = backend

    async def exists(self, driver_id: UUID) -> bool:
        return driver_id in self._backend.drivers

    async def is_eligible(self, driver_id: UUID) -> bool:
        driver = self._backend.drivers.get(driver_id)
        if driver is None:
            return False
        return driver.is_active and driver.driver_status == DriverStatus.ACTIVE
