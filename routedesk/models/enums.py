"""
Enum type definitions for RouteDesk.

These enums map directly to PostgreSQL ENUM types created by the
baseline migration. Order statuses are stored upper-case, route,
stop and driver statuses lower-case, matching the dashboard data.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status."""
    PENDING = "PENDING"        # Waiting for a route
    ASSIGNED = "ASSIGNED"      # Attached to a route as a stop
    ENROUTE = "ENROUTE"        # Driver is on the way
    DELIVERED = "DELIVERED"    # Handed over to the customer
    CANCELLED = "CANCELLED"    # Cancelled by customer/operator

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are expected."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class RouteStatus(str, Enum):
    """
    Route lifecycle status.

    scheduled -> in-progress -> completed, with delayed reachable from
    scheduled or in-progress (and able to resume).
    """
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DELAYED = "delayed"

    @property
    def is_terminal(self) -> bool:
        return self == RouteStatus.COMPLETED

    def can_transition_to(self, target: "RouteStatus") -> bool:
        """Check if moving from this status to *target* is allowed."""
        if target == self:
            return True
        return target in _ROUTE_TRANSITIONS[self]


_ROUTE_TRANSITIONS: dict[RouteStatus, frozenset[RouteStatus]] = {
    RouteStatus.SCHEDULED: frozenset({RouteStatus.IN_PROGRESS, RouteStatus.DELAYED}),
    RouteStatus.IN_PROGRESS: frozenset({RouteStatus.COMPLETED, RouteStatus.DELAYED}),
    RouteStatus.DELAYED: frozenset({RouteStatus.IN_PROGRESS, RouteStatus.COMPLETED}),
    RouteStatus.COMPLETED: frozenset(),
}


class StopStatus(str, Enum):
    """Individual stop delivery status."""
    PENDING = "pending"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class DriverStatus(str, Enum):
    """Driver duty status."""
    ACTIVE = "active"
    ON_DELIVERY = "on-delivery"
    OFF_DUTY = "off-duty"
    ON_BREAK = "on-break"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Persist enum values rather than member names."""
    return [member.value for member in enum_cls]
