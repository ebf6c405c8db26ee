"""FastAPI dependencies shared by endpoint modules."""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from routedesk.core.config import get_settings
from routedesk.db.database import get_async_session
from routedesk.services.assignment import RouteAssignmentCoordinator, build_sql_coordinator


async def get_assignment_coordinator(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> RouteAssignmentCoordinator:
    """Dependency providing a coordinator bound to the request's session.

    Usage:
        @router.post("/routes")
        async def create_route(
            coordinator: Annotated[RouteAssignmentCoordinator, Depends(get_assignment_coordinator)]
        ):
            ...
    """
    return build_sql_coordinator(session, get_settings())
