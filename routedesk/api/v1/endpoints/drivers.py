"""
Driver API endpoints.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from routedesk.db.database import get_async_session
from routedesk.models import Driver, DriverStatus, Route
from routedesk.schemas.driver import (
    DriverCreate,
    DriverListResponse,
    DriverResponse,
    DriverStatusUpdate,
    DriverUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    available_only: bool = False,
    session: AsyncSession = Depends(get_async_session),
):
    """
    List drivers.

    - **available_only**: Only drivers that can take a new route
    """
    query = select(Driver)
    if available_only:
        query = query.where(
            Driver.is_active == True,  # noqa: E712
            Driver.driver_status == DriverStatus.ACTIVE,
        )
    query = query.order_by(Driver.name)

    result = await session.execute(query)
    drivers = result.scalars().all()

    return DriverListResponse(
        items=[DriverResponse.model_validate(d) for d in drivers],
        total=len(drivers),
    )


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: UUID,
    session: AsyncSession = Depends(get_async_session),
):
    """Get a specific driver by ID."""
    result = await session.execute(
        select(Driver).where(Driver.id == driver_id)
    )
    driver = result.scalar_one_or_none()

    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")

    return DriverResponse.model_validate(driver)


@router.post("", response_model=DriverResponse, status_code=201)
async def create_driver(
    data: DriverCreate,
    session: AsyncSession = Depends(get_async_session),
):
    """
    Register a driver.

    New drivers are active and on duty unless the request says otherwise.
    """
    driver = Driver(
        name=data.name.strip(),
        phone=data.phone,
        email=data.email,
        driver_status=DriverStatus(data.driver_status),
        is_active=data.is_active,
    )

    session.add(driver)
    await session.flush()
    await session.refresh(driver)
    logger.info(f"Driver {driver.id} registered")

    return DriverResponse.model_validate(driver)


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: UUID,
    data: DriverUpdate,
    session: AsyncSession = Depends(get_async_session),
):
    """Update a driver's contact details or account state."""
    driver = await _get_driver(session, driver_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(driver, field, value)

    await session.flush()
    await session.refresh(driver)

    return DriverResponse.model_validate(driver)


@router.patch("/{driver_id}/status", response_model=DriverResponse)
async def update_driver_status(
    driver_id: UUID,
    data: DriverStatusUpdate,
    session: AsyncSession = Depends(get_async_session),
):
    """
    Set a driver's duty status.

    Only drivers that are active and on duty can be given a new route.
    """
    driver = await _get_driver(session, driver_id)

    driver.driver_status = DriverStatus(data.driver_status)
    await session.flush()
    await session.refresh(driver)
    logger.info(f"Driver {driver.id} is now {driver.driver_status.value}")

    return DriverResponse.model_validate(driver)


@router.delete("/{driver_id}", status_code=204)
async def delete_driver(
    driver_id: UUID,
    session: AsyncSession = Depends(get_async_session),
):
    """Delete a driver (only if no routes reference them)."""
    result = await session.execute(
        select(Driver).where(Driver.id == driver_id)
    )
    driver = result.scalar_one_or_none()

    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")

    route_count = await session.scalar(
        select(func.count(Route.id)).where(Route.driver_id == driver_id)
    )
    if route_count:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot delete driver with {route_count} assigned routes. "
                   "Please reassign routes first.",
        )

    await session.delete(driver)


async def _get_driver(session: AsyncSession, driver_id: UUID) -> Driver:
    result = await session.execute(
        select(Driver).where(Driver.id == driver_id)
    )
    driver = result.scalar_one_or_none()

    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")

    return driver
