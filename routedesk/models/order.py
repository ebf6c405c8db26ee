"""
Order model for RouteDesk.
"""
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Integer, String, Text, Numeric, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from routedesk.db.database import Base
from routedesk.models.base import TimestampMixin
from routedesk.models.enums import OrderStatus, enum_values

if TYPE_CHECKING:
    from routedesk.models.route import RouteStop


class Order(Base, TimestampMixin):
    """
    Customer order awaiting or undergoing delivery.

    Orders are created by the storefront as PENDING. Route assignment
    moves them to ASSIGNED; later transitions are driven elsewhere.
    Address and price are display fields only.
    """
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    status: Mapped[OrderStatus] = mapped_column(
        Enum(
            OrderStatus,
            name="order_status",
            create_type=False,
            values_callable=enum_values,
        ),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    # Snapshot of the customer handle at order time (denormalized)
    customer_name: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    address: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    total_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    route_stops: Mapped[list["RouteStop"]] = relationship(
        "RouteStop",
        back_populates="order",
        lazy="select",
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, status={self.status.value})>"
