"""
Collaborator interfaces used by route assignment.

The coordinator only talks to these abstract classes. Every call is a
suspension point against the backing store; implementations raise
``StorageError`` (or let their driver's error propagate) when a write is
rejected rather than returning a failure flag.
"""
from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import Optional
from uuid import UUID

from routedesk.models.enums import OrderStatus
from routedesk.services.assignment.types import OrderSnapshot, RouteAttributes, StopDraft


class OrderStore(ABC):
    """Read and update order status."""

    @abstractmethod
    async def list_pending(self) -> list[OrderSnapshot]:
        """Return orders still waiting for a route, newest first."""

    @abstractmethod
    async def get_many(self, order_ids: Sequence[int]) -> dict[int, OrderSnapshot]:
        """Return the orders that exist among *order_ids*, keyed by id."""

    @abstractmethod
    async def set_status(self, order_id: int, status: OrderStatus) -> None:
        """Set one order's status.

        Raises:
            StorageError: If the order is missing or the write is rejected.
        """


class RouteRepository(ABC):
    """Persist route headers and their stop lists."""

    @abstractmethod
    async def create_route(self, attrs: RouteAttributes) -> UUID:
        """Insert a route header and return its id."""

    @abstractmethod
    async def update_route(self, route_id: UUID, attrs: RouteAttributes) -> None:
        """Overwrite a route header."""

    @abstractmethod
    async def get_route(self, route_id: UUID) -> Optional[RouteAttributes]:
        """Return the route header, or None if it does not exist."""

    @abstractmethod
    async def delete_stops(self, route_id: UUID) -> int:
        """Delete every stop of a route and return how many were removed."""

    @abstractmethod
    async def insert_stops(self, stops: Sequence[StopDraft]) -> None:
        """Insert stops.

        Raises:
            ConstraintViolation: If an order already has an open stop or a
                stop number is taken on the route.
        """

    @abstractmethod
    async def list_stops(self, route_id: UUID) -> list[StopDraft]:
        """Return a route's stops ordered by stop number."""

    @abstractmethod
    async def routes_for_orders(self, order_ids: Sequence[int]) -> dict[int, UUID]:
        """Map each order that currently has an open stop to the route holding it."""

    @abstractmethod
    async def close_stops(self, route_id: UUID) -> int:
        """Mark a finished route's stops closed, releasing their orders.

        Returns the number of stops closed.
        """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Async context manager that undoes all writes made inside it on error.

        Covers writes made through the order store sharing this backend.
        """


class DriverDirectory(ABC):
    """Driver lookups needed to validate an assignment."""

    @abstractmethod
    async def exists(self, driver_id: UUID) -> bool:
        ...

    @abstractmethod
    async def is_eligible(self, driver_id: UUID) -> bool:
        """Check if the driver is active and available for a new route."""
