"""
Route and RouteStop Pydantic schemas.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from routedesk.models.enums import RouteStatus, StopStatus
from routedesk.schemas.base import BaseSchema
from routedesk.services.assignment.types import RouteAttributes


class RouteStopResponse(BaseSchema):
    """Schema for route stop response."""
    id: UUID
    route_id: UUID
    order_id: int
    stop_number: int
    status: StopStatus
    estimated_arrival_time: Optional[datetime]
    actual_arrival_time: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class RouteAssign(BaseSchema):
    """
    Schema for creating or replacing a route.

    ``order_ids`` is the operator's selection in stop order. Emptiness and
    duplicates are reported by route assignment itself so both HTTP and
    library callers see the same errors.
    """
    name: str = Field(..., max_length=100)
    driver_id: UUID
    status: Optional[RouteStatus] = None
    start_address: str
    estimated_completion_time: Optional[datetime] = None
    notes: Optional[str] = None
    order_ids: list[int] = Field(default_factory=list)
    stop_arrival_times: Optional[dict[int, datetime]] = Field(
        None,
        description="Optional estimated arrival time per order id",
    )

    def to_attributes(self, default_status: Optional[RouteStatus] = None) -> RouteAttributes:
        """
        Route header fields for the coordinator.

        With neither a request status nor a default the status stays None,
        which keeps an existing route's status on update.
        """
        return RouteAttributes(
            name=self.name.strip(),
            driver_id=self.driver_id,
            start_address=self.start_address.strip(),
            status=RouteStatus(self.status) if self.status else default_status,
            estimated_completion_time=self.estimated_completion_time,
            notes=self.notes,
        )


class RouteResponse(BaseSchema):
    """Schema for route response."""
    id: UUID
    name: str
    driver_id: UUID
    status: RouteStatus
    start_address: str
    estimated_completion_time: Optional[datetime]
    notes: Optional[str]
    actual_start_time: Optional[datetime]
    actual_completion_time: Optional[datetime]

    stop_count: int
    # Stops (ordered by stop number)
    stops: list[RouteStopResponse] = []

    created_at: datetime
    updated_at: datetime


class RouteListResponse(BaseSchema):
    """Schema for list of routes."""
    items: list[RouteResponse]
    total: int


class AssignmentResponse(BaseSchema):
    """Result of a create/update through route assignment."""
    route_id: UUID
    stop_count: int
    created: bool
    order_ids: list[int]
    route: RouteResponse


class RouteStatusUpdate(BaseSchema):
    status: RouteStatus


class RouteStopUpdate(BaseSchema):
    """Schema for updating a route stop during execution."""
    status: Optional[StopStatus] = None
    estimated_arrival_time: Optional[datetime] = None
    actual_arrival_time: Optional[datetime] = None

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: Optional[StopStatus]) -> StopStatus:
        # Omit the field to leave the status alone; the column is NOT NULL
        if v is None:
            raise ValueError("status cannot be null")
        return v
