"""
Driver Pydantic schemas.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from routedesk.models.enums import DriverStatus
from routedesk.schemas.base import BaseSchema


class DriverBase(BaseSchema):
    """Base driver schema with common fields."""
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)


class DriverCreate(DriverBase):
    """Schema for registering a driver."""
    driver_status: DriverStatus = DriverStatus.ACTIVE
    is_active: bool = True


class DriverUpdate(BaseSchema):
    """Schema for updating a driver (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class DriverStatusUpdate(BaseSchema):
    driver_status: DriverStatus


class DriverResponse(DriverBase):
    """Schema for driver response."""
    id: UUID
    driver_status: DriverStatus
    is_active: bool
    is_eligible: bool
    created_at: datetime
    updated_at: datetime


class DriverListResponse(BaseSchema):
    """Schema for list of drivers."""
    items: list[DriverResponse]
    total: int
