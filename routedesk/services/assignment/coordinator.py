"""
Route assignment coordinator.

Creates or updates a route together with its stops and moves every
selected order to ASSIGNED. Steps run strictly in sequence:

1. Validate input (no writes yet)
2. Write the route header (create or update)
3. On update, delete the route's current stops
4. Sequence the selection into numbered stops
5. Insert the stops
6. Set each selected order to ASSIGNED

In atomic mode steps 2-6 share one transaction and a failure undoes all
of them. Otherwise each write step commits on its own and a failure
leaves the earlier steps in place; ``PersistenceError.rolled_back`` tells
the caller which happened.
"""
import logging
from collections.abc import Mapping, Sequence
from contextlib import AbstractAsyncContextManager, nullcontext
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

from routedesk.models.enums import OrderStatus, RouteStatus
from routedesk.services.assignment.exceptions import (
    AssignmentStep,
    DriverNotEligible,
    DriverNotFound,
    EmptySelection,
    OrderNotAssignable,
    OrderNotFound,
    PersistenceError,
    RouteNotFound,
    ValidationError,
)
from routedesk.services.assignment.sequencer import check_selection, sequence_stops
from routedesk.services.assignment.stores import DriverDirectory, OrderStore, RouteRepository
from routedesk.services.assignment.types import AssignmentResult, OrderSnapshot, RouteAttributes

logger = logging.getLogger(__name__)


class _StepFailed(Exception):
    def __init__(self, cause: Exception):
        super().__init__(str(cause))
        self.cause = cause


@dataclass
class _Attempt:
    """Where an assign call got to, for error reporting."""
    route_id: Optional[UUID]
    step: AssignmentStep = AssignmentStep.WRITE_ROUTE


class RouteAssignmentCoordinator:
    """
    Orchestrates route create/update against the three collaborators.

    Args:
        orders: Order status storage
        routes: Route and stop storage; also provides transactions
        drivers: Driver lookups for validation
        atomic: Run all write steps in a single transaction
    """

    def __init__(
        self,
        orders: OrderStore,
        routes: RouteRepository,
        drivers: DriverDirectory,
        atomic: bool = True,
    ):
        self.orders = orders
        self.routes = routes
        self.drivers = drivers
        self.atomic = atomic

    async def assign(
        self,
        attrs: RouteAttributes,
        order_ids: Sequence[int],
        route_id: Optional[UUID] = None,
        arrival_times: Optional[Mapping[int, datetime]] = None,
    ) -> AssignmentResult:
        """
        Create a route (``route_id`` is None) or replace an existing one.

        Args:
            attrs: Route header fields; a None status keeps the current one
            order_ids: Selected orders in stop order
            route_id: Existing route to update
            arrival_times: Optional estimated arrival per order id

        Returns:
            The persisted route id and its stops

        Raises:
            ValidationError: Input rejected before any write
            PersistenceError: A write step failed
        """
        order_ids = list(order_ids)
        current = await self.validate(attrs, order_ids, route_id)
        attrs = self._resolve_status(attrs, current)

        attempt = _Attempt(route_id=route_id)
        try:
            async with self._outer_transaction():
                result = await self._persist(attrs, order_ids, arrival_times, attempt)
        except _StepFailed as failure:
            raise self._failure(attempt, failure.cause) from failure.cause
        except Exception as exc:
            # Opening or closing the transaction itself failed
            raise self._failure(attempt, exc) from exc

        logger.info(
            f"Route {result.route_id} {'created' if result.created else 'updated'} "
            f"with {result.stop_count} stops for driver {attrs.driver_id}"
        )
        return result

    async def validate(
        self,
        attrs: RouteAttributes,
        order_ids: Sequence[int],
        route_id: Optional[UUID] = None,
    ) -> Optional[RouteAttributes]:
        """
        Check everything that can be checked without writing.

        Returns:
            The stored header of the route being updated, None on create

        Raises:
            ValidationError: Or one of its subclasses
        """
        try:
            return await self._validate(attrs, order_ids, route_id)
        except ValidationError as exc:
            logger.warning(f"Route assignment rejected: {exc.message}")
            raise

    async def _validate(
        self,
        attrs: RouteAttributes,
        order_ids: Sequence[int],
        route_id: Optional[UUID],
    ) -> Optional[RouteAttributes]:
        if not attrs.name or not attrs.name.strip():
            raise ValidationError("Route name is required", field="name")
        if attrs.driver_id is None:
            raise ValidationError("A driver must be assigned", field="driver_id")
        if not attrs.start_address or not attrs.start_address.strip():
            raise ValidationError("Start address is required", field="start_address")
        if not order_ids:
            raise EmptySelection()
        check_selection(order_ids)

        current = None
        if route_id is not None:
            current = await self.routes.get_route(route_id)
            if current is None:
                raise RouteNotFound(route_id)
            if (
                attrs.status is not None
                and current.status is not None
                and not current.status.can_transition_to(attrs.status)
            ):
                raise ValidationError(
                    f"Cannot move route from {current.status.value} to {attrs.status.value}",
                    field="status",
                )

        if not await self.drivers.exists(attrs.driver_id):
            raise DriverNotFound(attrs.driver_id)
        # Keeping the driver already on the route does not need them to be free
        keeps_driver = current is not None and current.driver_id == attrs.driver_id
        if not keeps_driver and not await self.drivers.is_eligible(attrs.driver_id):
            raise DriverNotEligible(attrs.driver_id)

        orders = await self.orders.get_many(order_ids)
        missing = [oid for oid in order_ids if oid not in orders]
        if missing:
            raise OrderNotFound(missing)

        holders = await self.routes.routes_for_orders(order_ids)
        for order_id in order_ids:
            self._check_assignable(orders[order_id], holders.get(order_id), route_id)

        return current

    @staticmethod
    def _check_assignable(
        order: OrderSnapshot,
        holding_route: Optional[UUID],
        route_id: Optional[UUID],
    ) -> None:
        """
        An order can go on this route if it is PENDING or ASSIGNED and no
        other route holds an open stop for it.
        """
        if order.status not in (OrderStatus.PENDING, OrderStatus.ASSIGNED):
            raise OrderNotAssignable(order.id, order.status.value)
        if holding_route is not None and holding_route != route_id:
            raise OrderNotAssignable(order.id, f"{order.status.value} on route {holding_route}")

    @staticmethod
    def _resolve_status(
        attrs: RouteAttributes,
        current: Optional[RouteAttributes],
    ) -> RouteAttributes:
        if attrs.status is not None:
            return attrs
        if current is not None and current.status is not None:
            return replace(attrs, status=current.status)
        return replace(attrs, status=RouteStatus.SCHEDULED)

    async def _persist(
        self,
        attrs: RouteAttributes,
        order_ids: list[int],
        arrival_times: Optional[Mapping[int, datetime]],
        attempt: _Attempt,
    ) -> AssignmentResult:
        created = attempt.route_id is None

        if created:
            attempt.route_id = await self._step(
                attempt, AssignmentStep.WRITE_ROUTE, self.routes.create_route, attrs
            )
        else:
            await self._step(
                attempt, AssignmentStep.WRITE_ROUTE,
                self.routes.update_route, attempt.route_id, attrs,
            )
        route_id = attempt.route_id

        if not created:
            removed = await self._step(
                attempt, AssignmentStep.DELETE_STOPS, self.routes.delete_stops, route_id
            )
            logger.debug(f"Removed {removed} previous stops from route {route_id}")

        stops = sequence_stops(order_ids, route_id, arrival_times)
        if attrs.status.is_terminal:
            # A finished route does not hold its orders
            stops = [replace(stop, is_open=False) for stop in stops]
        await self._step(
            attempt, AssignmentStep.INSERT_STOPS, self.routes.insert_stops, stops
        )

        for order_id in order_ids:
            await self._step(
                attempt,
                AssignmentStep.SET_ORDER_STATUS,
                self.orders.set_status,
                order_id,
                OrderStatus.ASSIGNED,
            )

        return AssignmentResult(route_id=route_id, stops=stops, created=created)

    def _outer_transaction(self) -> AbstractAsyncContextManager[Any]:
        if self.atomic:
            return self.routes.transaction()
        return nullcontext()

    async def _step(
        self,
        attempt: _Attempt,
        step: AssignmentStep,
        action: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        attempt.step = step
        try:
            if self.atomic:
                return await action(*args)
            # Each write stands alone: a failure undoes only itself
            async with self.routes.transaction():
                return await action(*args)
        except Exception as exc:
            raise _StepFailed(exc) from exc

    def _failure(self, attempt: _Attempt, cause: Exception) -> PersistenceError:
        logger.error(
            f"Route assignment failed at {attempt.step.value} "
            f"(route {attempt.route_id}, rolled_back={self.atomic}): {cause}"
        )
        return PersistenceError(
            step=attempt.step,
            cause=cause,
            route_id=attempt.route_id,
            rolled_back=self.atomic,
        )
