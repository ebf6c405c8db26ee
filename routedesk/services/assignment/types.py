"""
Plain data carried between the coordinator and its collaborators.

These are storage-agnostic snapshots; the SQLAlchemy collaborators map
them to and from ORM rows.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from routedesk.models.enums import OrderStatus, RouteStatus, StopStatus


@dataclass(frozen=True)
class OrderSnapshot:
    """An order as seen by route assignment."""
    id: int
    status: OrderStatus
    customer_name: Optional[str] = None
    address: str = ""
    total_price: Decimal = Decimal("0")


@dataclass(frozen=True)
class RouteAttributes:
    """
    Route header fields written in the route-write step.

    ``status`` None means "keep the route's current status" on update and
    ``scheduled`` on create.
    """
    name: str
    driver_id: UUID
    start_address: str
    status: Optional[RouteStatus] = None
    estimated_completion_time: Optional[datetime] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class StopDraft:
    """A stop ready to be inserted for a route."""
    route_id: UUID
    order_id: int
    stop_number: int
    status: StopStatus = StopStatus.PENDING
    estimated_arrival_time: Optional[datetime] = None
    is_open: bool = True

    def bound_to(self, route_id: UUID) -> "StopDraft":
        return replace(self, route_id=route_id)


@dataclass
class AssignmentResult:
    """Outcome of a successful create/update."""
    route_id: UUID
    stops: list[StopDraft] = field(default_factory=list)
    created: bool = True

    @property
    def stop_count(self) -> int:
        return len(self.stops)

    @property
    def order_ids(self) -> list[int]:
        return [stop.order_id for stop in self.stops]
