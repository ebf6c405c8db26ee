"""
Route assignment package.

Builds ordered stop lists from an operator's order selection and keeps
route, stop and order state consistent while persisting them.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from routedesk.core.config import Settings, get_settings
from routedesk.services.assignment.coordinator import RouteAssignmentCoordinator
from routedesk.services.assignment.exceptions import (
    AssignmentError,
    AssignmentStep,
    ConstraintViolation,
    DriverNotEligible,
    DriverNotFound,
    DuplicateOrder,
    EmptySelection,
    InvalidSelection,
    OrderNotAssignable,
    OrderNotFound,
    PersistenceError,
    RouteNotFound,
    StorageError,
    ValidationError,
)
from routedesk.services.assignment.memory import (
    DriverRecord,
    InMemoryBackend,
    InMemoryDriverDirectory,
    InMemoryOrderStore,
    InMemoryRouteRepository,
)
from routedesk.services.assignment.sequencer import check_selection, sequence_stops
from routedesk.services.assignment.sql import (
    SqlDriverDirectory,
    SqlOrderStore,
    SqlRouteRepository,
)
from routedesk.services.assignment.stores import DriverDirectory, OrderStore, RouteRepository
from routedesk.services.assignment.types import (
    AssignmentResult,
    OrderSnapshot,
    RouteAttributes,
    StopDraft,
)


def build_sql_coordinator(
    session: AsyncSession,
    settings: Settings | None = None,
) -> RouteAssignmentCoordinator:
    """Coordinator backed by the SQLAlchemy collaborators sharing *session*."""
    settings = settings or get_settings()
    return RouteAssignmentCoordinator(
        orders=SqlOrderStore(session),
        routes=SqlRouteRepository(session),
        drivers=SqlDriverDirectory(session),
        atomic=settings.assignment_atomic,
    )


def build_memory_coordinator(
    backend: InMemoryBackend,
    atomic: bool = True,
) -> RouteAssignmentCoordinator:
    """Coordinator backed by in-memory collaborators sharing *backend*."""
    return RouteAssignmentCoordinator(
        orders=InMemoryOrderStore(backend),
        routes=InMemoryRouteRepository(backend),
        drivers=InMemoryDriverDirectory(backend),
        atomic=atomic,
    )


__all__ = [
    # Coordinator
    "RouteAssignmentCoordinator",
    "build_sql_coordinator",
    "build_memory_coordinator",
    # Sequencer
    "sequence_stops",
    "check_selection",
    # Data
    "AssignmentResult",
    "OrderSnapshot",
    "RouteAttributes",
    "StopDraft",
    # Collaborators
    "OrderStore",
    "RouteRepository",
    "DriverDirectory",
    "InMemoryBackend",
    "InMemoryOrderStore",
    "InMemoryRouteRepository",
    "InMemoryDriverDirectory",
    "DriverRecord",
    "SqlOrderStore",
    "SqlRouteRepository",
    "SqlDriverDirectory",
    # Errors
    "AssignmentError",
    "AssignmentStep",
    "ValidationError",
    "InvalidSelection",
    "EmptySelection",
    "DuplicateOrder",
    "OrderNotFound",
    "OrderNotAssignable",
    "DriverNotFound",
    "DriverNotEligible",
    "RouteNotFound",
    "StorageError",
    "ConstraintViolation",
    "PersistenceError",
]
