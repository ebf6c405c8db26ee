"""
Route and RouteStop models for RouteDesk.

A route is a named, driver-assigned delivery run; its stops are the
orders it visits, numbered in the order the operator selected them.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import (
    Boolean, DateTime, Enum, ForeignKey, Index, Integer, String, Text, UniqueConstraint, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from routedesk.models.base import BaseModel
from routedesk.models.enums import RouteStatus, StopStatus, enum_values

if TYPE_CHECKING:
    from routedesk.models.driver import Driver
    from routedesk.models.order import Order


class Route(BaseModel):
    """
    Delivery route assigned to a driver.

    Stores the plan header only:
    - Driver assignment
    - Start address and target completion time
    - Actual start/completion times recorded during execution
    """
    __tablename__ = "routes"

    # =========================================================================
    # Route Identification
    # =========================================================================
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # =========================================================================
    # Driver Assignment
    # =========================================================================
    driver_id: Mapped[UUID] = mapped_column(
        ForeignKey("drivers.id"),
        nullable=False,
        index=True,
    )

    # =========================================================================
    # Route Status
    # =========================================================================
    status: Mapped[RouteStatus] = mapped_column(
        Enum(
            RouteStatus,
            name="route_status",
            create_type=False,
            values_callable=enum_values,
        ),
        nullable=False,
        default=RouteStatus.SCHEDULED,
    )

    # =========================================================================
    # Planning
    # =========================================================================
    start_address: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    estimated_completion_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    # =========================================================================
    # Execution
    # =========================================================================
    actual_start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    actual_completion_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # =========================================================================
    # Relationships
    # =========================================================================
    driver: Mapped["Driver"] = relationship(
        "Driver",
        back_populates="routes",
        lazy="select",
    )

    stops: Mapped[list["RouteStop"]] = relationship(
        "RouteStop",
        back_populates="route",
        order_by="RouteStop.stop_number",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return (
            f"<Route(id={self.id}, name={self.name!r}, "
            f"stops={len(self.stops)}, status={self.status.value})>"
        )


class RouteStop(BaseModel):
    """
    One order's position within a route.

    ``stop_number`` is 1-based and contiguous within a route. An order may
    hold at most one open stop, which guards against two operators
    assigning the same order concurrently. Stops are closed when their
    route completes so the order can be routed again.
    """
    __tablename__ = "route_stops"

    __table_args__ = (
        UniqueConstraint("route_id", "stop_number", name="uq_route_stop_number"),
        Index(
            "uq_route_stop_open_order",
            "order_id",
            unique=True,
            postgresql_where=text("is_open"),
        ),
    )

    route_id: Mapped[UUID] = mapped_column(
        ForeignKey("routes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"),
        nullable=False,
    )

    stop_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Stop sequence (1-based)",
    )

    status: Mapped[StopStatus] = mapped_column(
        Enum(
            StopStatus,
            name="stop_status",
            create_type=False,
            values_callable=enum_values,
        ),
        nullable=False,
        default=StopStatus.PENDING,
    )

    estimated_arrival_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    actual_arrival_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # False once the route is completed; only open stops hold their order
    is_open: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=text("true"),
        nullable=False,
    )

    # =========================================================================
    # Relationships
    # =========================================================================
    route: Mapped["Route"] = relationship(
        "Route",
        back_populates="stops",
        lazy="joined",
    )

    order: Mapped["Order"] = relationship(
        "Order",
        back_populates="route_stops",
        lazy="joined",
    )

    def __repr__(self) -> str:
        return (
            f"<RouteStop(route={self.route_id}, stop={self.stop_number}, "
            f"order={self.order_id}, status={self.status.value})>"
        )
