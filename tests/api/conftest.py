"""API test fixtures -- helpers for configuring mock session returns."""
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4


def make_mock_result(scalar_value=None, scalars_list=None):
    """Create a mock SQLAlchemy Result object."""
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=scalar_value)

    scalars_mock = MagicMock()
    scalars_mock.all = MagicMock(return_value=scalars_list or [])
    scalars_mock.unique = MagicMock(return_value=scalars_mock)
    result.scalars = MagicMock(return_value=scalars_mock)
    result.all = MagicMock(return_value=[])
    result.rowcount = len(scalars_list) if scalars_list else (1 if scalar_value else 0)

    return result


def make_mock_order(order_id=1, status="PENDING", total_price="25.00"):
    """Create a mock Order ORM object."""
    from routedesk.models.enums import OrderStatus

    order = MagicMock()
    order.id = order_id
    order.status = OrderStatus(status)
    order.customer_name = "Test Customer"
    order.address = f"{order_id} Main St"
    order.total_price = Decimal(total_price)
    order.notes = None
    order.created_at = datetime.now()
    order.updated_at = datetime.now()
    return order


def make_mock_driver(driver_id=None, driver_status="active", is_active=True):
    """Create a mock Driver ORM object."""
    from routedesk.models.enums import DriverStatus

    driver = MagicMock()
    driver.id = driver_id or uuid4()
    driver.name = "Test Driver"
    driver.phone = "555-0100"
    driver.email = "driver@example.com"
    driver.driver_status = DriverStatus(driver_status)
    driver.is_active = is_active
    driver.is_eligible = is_active and driver.driver_status == DriverStatus.ACTIVE
    driver.created_at = datetime.now()
    driver.updated_at = datetime.now()
    return driver


def make_mock_stop(route_id, order_id=1, stop_number=1, status="pending"):
    """Create a mock RouteStop ORM object."""
    from routedesk.models.enums import StopStatus

    stop = MagicMock()
    stop.id = uuid4()
    stop.route_id = route_id
    stop.order_id = order_id
    stop.stop_number = stop_number
    stop.status = StopStatus(status)
    stop.estimated_arrival_time = None
    stop.actual_arrival_time = None
    stop.created_at = datetime.now()
    stop.updated_at = datetime.now()
    return stop


def make_mock_route(route_id=None, status="scheduled", order_ids=(), driver_id=None):
    """Create a mock Route ORM object with one stop per order id."""
    from routedesk.models.enums import RouteStatus

    route = MagicMock()
    route.id = route_id or uuid4()
    route.name = "Morning Route #1"
    route.driver_id = driver_id or uuid4()
    route.status = RouteStatus(status)
    route.start_address = "1 Depot Rd"
    route.estimated_completion_time = None
    route.notes = None
    route.actual_start_time = None
    route.actual_completion_time = None
    route.stops = [
        make_mock_stop(route.id, order_id=oid, stop_number=n)
        for n, oid in enumerate(order_ids, start=1)
    ]
    route.created_at = datetime.now()
    route.updated_at = datetime.now()
    return route
