"""
Driver model for RouteDesk.
"""
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from routedesk.models.base import BaseModel
from routedesk.models.enums import DriverStatus, enum_values

if TYPE_CHECKING:
    from routedesk.models.route import Route


class Driver(BaseModel):
    """
    Driver reference data.

    Identity is owned by the external identity provider; this table keeps
    the fields route assignment needs to decide eligibility.

    Attributes:
        name: Driver's display name
        phone: Contact phone number
        email: Contact email
        driver_status: Current duty status
        is_active: Whether the driver account is enabled
    """
    __tablename__ = "drivers"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    driver_status: Mapped[DriverStatus] = mapped_column(
        Enum(
            DriverStatus,
            name="driver_status",
            create_type=False,
            values_callable=enum_values,
        ),
        nullable=False,
        default=DriverStatus.ACTIVE,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    routes: Mapped[list["Route"]] = relationship(
        "Route",
        back_populates="driver",
        lazy="select",
    )

    @property
    def is_eligible(self) -> bool:
        """Check if the driver can be given a new route."""
        return self.is_active and self.driver_status == DriverStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name={self.name!r}, status={self.driver_status.value})>"
