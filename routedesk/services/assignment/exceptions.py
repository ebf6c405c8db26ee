"""
Exceptions raised by route assignment.

``ValidationError`` and its subclasses are raised before anything is
written. ``PersistenceError`` means a write step failed; it records which
step, the underlying cause and whether earlier writes were rolled back.
"""
from enum import Enum
from typing import Any, Optional
from uuid import UUID


class AssignmentStep(str, Enum):
    """Write steps of an assignment, in execution order."""
    WRITE_ROUTE = "write_route"
    DELETE_STOPS = "delete_stops"
    INSERT_STOPS = "insert_stops"
    SET_ORDER_STATUS = "set_order_status"


class AssignmentError(Exception):
    """Base class for route assignment failures."""


class ValidationError(AssignmentError):
    """Malformed or incomplete input, caught before any persistence."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class InvalidSelection(ValidationError):
    """The order selection cannot be sequenced."""

    def __init__(self, message: str = "Selection must contain at least one order"):
        super().__init__(message, field="order_ids")


class EmptySelection(InvalidSelection):
    """No orders were selected for the route."""

    def __init__(self):
        super().__init__("You must select at least one order for the route")


class DuplicateOrder(ValidationError):
    """The same order was selected more than once."""

    def __init__(self, order_id: Any):
        super().__init__(f"Order {order_id} is selected more than once", field="order_ids")
        self.order_id = order_id


class OrderNotFound(ValidationError):
    """One or more selected orders do not exist."""

    def __init__(self, order_ids: list[Any]):
        ids = ", ".join(str(o) for o in order_ids)
        super().__init__(f"Orders not found: {ids}", field="order_ids")
        self.order_ids = order_ids


class OrderNotAssignable(ValidationError):
    """A selected order is in a status that cannot be put on a route."""

    def __init__(self, order_id: Any, status: str):
        super().__init__(
            f"Order {order_id} cannot be assigned from status {status}",
            field="order_ids",
        )
        self.order_id = order_id
        self.status = status


class DriverNotFound(ValidationError):
    def __init__(self, driver_id: Any):
        super().__init__(f"Driver {driver_id} not found", field="driver_id")
        self.driver_id = driver_id


class DriverNotEligible(ValidationError):
    """The driver exists but is not active/available."""

    def __init__(self, driver_id: Any):
        super().__init__(f"Driver {driver_id} is not available for routes", field="driver_id")
        self.driver_id = driver_id


class RouteNotFound(ValidationError):
    def __init__(self, route_id: Any):
        super().__init__(f"Route {route_id} not found", field="route_id")
        self.route_id = route_id


class StorageError(Exception):
    """Raised by a collaborator when the backing store rejects a write."""


class ConstraintViolation(StorageError):
    """A uniqueness or integrity rule of the backing store was violated."""


class PersistenceError(AssignmentError):
    """
    A write step failed against the backing store.

    Attributes:
        step: The step that failed
        cause: Exception raised by the collaborator
        route_id: Route id if the route record had been written
        rolled_back: True if every earlier write of this call was undone
    """

    def __init__(
        self,
        step: AssignmentStep,
        cause: BaseException,
        route_id: Optional[UUID] = None,
        rolled_back: bool = False,
    ):
        state = "rolled back" if rolled_back else "partial changes kept"
        super().__init__(f"Route assignment failed at {step.value} ({state}): {cause}")
        self.step = step
        self.cause = cause
        self.route_id = route_id
        self.rolled_back = rolled_back

    @property
    def is_conflict(self) -> bool:
        """Check if the failure came from a storage integrity rule."""
        return isinstance(self.cause, ConstraintViolation)
