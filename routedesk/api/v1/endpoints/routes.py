"""
Route API endpoints.
"""
import logging
from datetime import datetime, timezone
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from routedesk.core.config import get_settings
from routedesk.core.dependencies import get_assignment_coordinator
from routedesk.db.database import get_async_session
from routedesk.models import Route, RouteStop, RouteStatus
from routedesk.schemas.route import (
    AssignmentResponse,
    RouteAssign,
    RouteResponse,
    RouteListResponse,
    RouteStatusUpdate,
    RouteStopResponse,
    RouteStopUpdate,
)
from routedesk.services.assignment import (
    DriverNotFound,
    OrderNotFound,
    PersistenceError,
    RouteAssignmentCoordinator,
    RouteNotFound,
    SqlRouteRepository,
    ValidationError,
)

router = APIRouter()
logger = logging.getLogger(__name__)

Coordinator = Annotated[RouteAssignmentCoordinator, Depends(get_assignment_coordinator)]
Session = Annotated[AsyncSession, Depends(get_async_session)]


@router.get("", response_model=RouteListResponse)
async def list_routes(
    session: Session,
    status: Optional[RouteStatus] = None,
    driver_id: Optional[UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """
    List all routes with optional filtering.

    - **status**: Filter by route status
    - **driver_id**: Filter by assigned driver
    """
    query = select(Route).options(selectinload(Route.stops))

    if status:
        query = query.where(Route.status == status)
    if driver_id:
        query = query.where(Route.driver_id == driver_id)

    query = query.order_by(Route.updated_at.desc())
    query = query.offset(skip).limit(limit)

    result = await session.execute(query)
    routes = result.scalars().unique().all()

    count_query = select(func.count(Route.id))
    if status:
        count_query = count_query.where(Route.status == status)
    if driver_id:
        count_query = count_query.where(Route.driver_id == driver_id)
    total = await session.scalar(count_query)

    return RouteListResponse(
        items=[_route_to_response(r) for r in routes],
        total=total or 0,
    )


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(route_id: UUID, session: Session):
    """Get a specific route by ID with its stops in order."""
    route = await _load_route(session, route_id)

    if not route:
        raise HTTPException(status_code=404, detail="Route not found")

    return _route_to_response(route)


@router.post("", response_model=AssignmentResponse, status_code=201)
async def create_route(
    data: RouteAssign,
    session: Session,
    coordinator: Coordinator,
):
    """
    Create a route from a selection of pending orders.

    Stops are numbered in the order given by **order_ids** and every
    selected order is marked ASSIGNED.
    """
    return await _assign(session, coordinator, data, route_id=None)


@router.put("/{route_id}", response_model=AssignmentResponse)
async def update_route(
    route_id: UUID,
    data: RouteAssign,
    session: Session,
    coordinator: Coordinator,
):
    """
    Replace a route's header and its whole stop list.

    Previous stops are deleted before the new selection is inserted.
    """
    return await _assign(session, coordinator, data, route_id=route_id)


@router.patch("/{route_id}/status")
async def update_route_status(
    route_id: UUID,
    data: RouteStatusUpdate,
    session: Session,
):
    """
    Move a route to a new status.

    Allowed: scheduled -> in-progress -> completed, and delayed from
    scheduled or in-progress.
    """
    result = await session.execute(
        select(Route).where(Route.id == route_id)
    )
    route = result.scalar_one_or_none()

    if not route:
        raise HTTPException(status_code=404, detail="Route not found")

    target = RouteStatus(data.status)
    if not route.status.can_transition_to(target):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot move route from {route.status.value} to {target.value}",
        )

    now = datetime.now(timezone.utc)
    if target == RouteStatus.IN_PROGRESS and route.actual_start_time is None:
        route.actual_start_time = now
    if target == RouteStatus.COMPLETED:
        route.actual_completion_time = now

    route.status = target
    await session.flush()
    if target.is_terminal:
        released = await SqlRouteRepository(session).close_stops(route.id)
        logger.info(f"Route {route.id} released {released} orders")
    logger.info(f"Route {route.id} moved to {target.value}")

    return {"id": str(route.id), "status": route.status.value}


@router.patch("/{route_id}/stops/{stop_number}", response_model=RouteStopResponse)
async def update_route_stop(
    route_id: UUID,
    stop_number: int,
    data: RouteStopUpdate,
    session: Session,
):
    """
    Update a route stop (typically during execution).

    Used to record arrival times and mark stops completed or skipped.
    """
    result = await session.execute(
        select(RouteStop).where(
            RouteStop.route_id == route_id,
            RouteStop.stop_number == stop_number,
        )
    )
    stop = result.scalar_one_or_none()

    if not stop:
        raise HTTPException(status_code=404, detail="Route stop not found")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(stop, field, value)

    await session.flush()
    await session.refresh(stop)

    return RouteStopResponse.model_validate(stop)


@router.delete("/{route_id}", status_code=204)
async def delete_route(route_id: UUID, session: Session):
    """Delete a route and its stops. Order statuses are left unchanged."""
    result = await session.execute(
        select(Route).where(Route.id == route_id)
    )
    route = result.scalar_one_or_none()

    if not route:
        raise HTTPException(status_code=404, detail="Route not found")

    await session.delete(route)


async def _assign(
    session: AsyncSession,
    coordinator: RouteAssignmentCoordinator,
    data: RouteAssign,
    route_id: Optional[UUID],
) -> AssignmentResponse:
    """Run route assignment and translate its errors to HTTP responses."""
    default_status = None
    if route_id is None:
        default_status = RouteStatus(get_settings().default_route_status)
    attrs = data.to_attributes(default_status)

    try:
        result = await coordinator.assign(
            attrs,
            data.order_ids,
            route_id=route_id,
            arrival_times=data.stop_arrival_times,
        )
    except (RouteNotFound, DriverNotFound, OrderNotFound) as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": exc.message, "field": exc.field},
        )
    except PersistenceError as exc:
        if not exc.rolled_back:
            # Keep the steps that succeeded; the request session would otherwise undo them
            await session.commit()
        raise HTTPException(
            status_code=409 if exc.is_conflict else 500,
            detail={
                "message": "Failed to save route",
                "step": exc.step.value,
                "route_id": str(exc.route_id) if exc.route_id else None,
                "rolled_back": exc.rolled_back,
            },
        )

    route = await _load_route(session, result.route_id)
    return AssignmentResponse(
        route_id=result.route_id,
        stop_count=result.stop_count,
        created=result.created,
        order_ids=result.order_ids,
        route=_route_to_response(route),
    )


async def _load_route(session: AsyncSession, route_id: UUID) -> Optional[Route]:
    result = await session.execute(
        select(Route)
        .options(selectinload(Route.stops))
        .where(Route.id == route_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


def _route_to_response(route: Route) -> RouteResponse:
    """Convert Route model to response schema."""
    stops = sorted(route.stops, key=lambda s: s.stop_number)

    return RouteResponse(
        id=route.id,
        name=route.name,
        driver_id=route.driver_id,
        status=route.status,
        start_address=route.start_address,
        estimated_completion_time=route.estimated_completion_time,
        notes=route.notes,
        actual_start_time=route.actual_start_time,
        actual_completion_time=route.actual_completion_time,
        stop_count=len(stops),
        stops=[RouteStopResponse.model_validate(s) for s in stops],
        created_at=route.created_at,
        updated_at=route.updated_at,
    )
