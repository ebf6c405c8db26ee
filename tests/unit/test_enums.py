"""Tests for routedesk.models.enums -- stored values and route transitions."""
import pytest

from routedesk.models.enums import (
    DriverStatus,
    OrderStatus,
    RouteStatus,
    StopStatus,
    enum_values,
)


class TestOrderStatus:

    def test_all_statuses(self):
        expected = {"PENDING", "ASSIGNED", "ENROUTE", "DELIVERED", "CANCELLED"}
        assert {s.value for s in OrderStatus} == expected

    def test_terminal_statuses(self):
        assert OrderStatus.DELIVERED.is_terminal is True
        assert OrderStatus.CANCELLED.is_terminal is True
        assert OrderStatus.ASSIGNED.is_terminal is False


class TestRouteStatus:

    def test_all_statuses(self):
        expected = {"scheduled", "in-progress", "completed", "delayed"}
        assert {s.value for s in RouteStatus} == expected

    @pytest.mark.parametrize(
        "source, target",
        [
            (RouteStatus.SCHEDULED, RouteStatus.IN_PROGRESS),
            (RouteStatus.IN_PROGRESS, RouteStatus.COMPLETED),
            (RouteStatus.SCHEDULED, RouteStatus.DELAYED),
            (RouteStatus.IN_PROGRESS, RouteStatus.DELAYED),
            (RouteStatus.DELAYED, RouteStatus.IN_PROGRESS),
        ],
    )
    def test_allowed_transitions(self, source, target):
        assert source.can_transition_to(target) is True

    @pytest.mark.parametrize(
        "source, target",
        [
            (RouteStatus.SCHEDULED, RouteStatus.COMPLETED),
            (RouteStatus.IN_PROGRESS, RouteStatus.SCHEDULED),
            (RouteStatus.COMPLETED, RouteStatus.IN_PROGRESS),
            (RouteStatus.COMPLETED, RouteStatus.DELAYED),
        ],
    )
    def test_rejected_transitions(self, source, target):
        assert source.can_transition_to(target) is False

    def test_same_status_is_allowed(self):
        assert RouteStatus.COMPLETED.can_transition_to(RouteStatus.COMPLETED) is True

    def test_completed_is_terminal(self):
        assert RouteStatus.COMPLETED.is_terminal is True
        assert RouteStatus.DELAYED.is_terminal is False


class TestStoredValues:

    def test_stop_status_values(self):
        assert enum_values(StopStatus) == ["pending", "completed", "skipped"]

    def test_driver_status_values(self):
        assert enum_values(DriverStatus) == ["active", "on-delivery", "off-duty", "on-break"]
