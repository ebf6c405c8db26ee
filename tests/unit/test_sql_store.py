"""Tests for the SQLAlchemy collaborators with a mocked session."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from routedesk.models import Route, RouteStop
from routedesk.models.enums import DriverStatus, OrderStatus
from routedesk.services.assignment import (
    ConstraintViolation,
    SqlDriverDirectory,
    SqlOrderStore,
    SqlRouteRepository,
    StopDraft,
    StorageError,
)
from tests.api.conftest import make_mock_order, make_mock_result


def _rowcount(n):
    result = MagicMock()
    result.rowcount = n
    return result


class TestSqlOrderStore:

    async def test_get_many_maps_by_id(self, mock_session):
        mock_session.execute = AsyncMock(
            return_value=make_mock_result(scalars_list=[make_mock_order(5)])
        )
        found = await SqlOrderStore(mock_session).get_many([5])
        assert found[5].status == OrderStatus.PENDING

    async def test_list_pending_snapshots(self, mock_session):
        mock_session.execute = AsyncMock(
            return_value=make_mock_result(scalars_list=[make_mock_order(8), make_mock_order(6)])
        )
        pending = await SqlOrderStore(mock_session).list_pending()

        assert [o.id for o in pending] == [8, 6]
        assert pending[0].customer_name == "Test Customer"
        assert pending[0].address == "8 Main St"

    async def test_get_many_empty_skips_query(self, mock_session):
        assert await SqlOrderStore(mock_session).get_many([]) == {}
        mock_session.execute.assert_not_awaited()

    async def test_set_status_missing_order(self, mock_session):
        mock_session.execute = AsyncMock(return_value=_rowcount(0))
        with pytest.raises(StorageError):
            await SqlOrderStore(mock_session).set_status(9, OrderStatus.ASSIGNED)

    async def test_set_status(self, mock_session):
        mock_session.execute = AsyncMock(return_value=_rowcount(1))
        await SqlOrderStore(mock_session).set_status(9, OrderStatus.ASSIGNED)
        mock_session.execute.assert_awaited_once()


class TestSqlRouteRepository:

    async def test_create_route_adds_and_flushes(self, mock_session, make_attrs):
        await SqlRouteRepository(mock_session).create_route(make_attrs(name="Route A"))

        added = mock_session.add.call_args.args[0]
        assert isinstance(added, Route)
        assert added.name == "Route A"
        mock_session.flush.assert_awaited_once()

    async def test_update_missing_route(self, mock_session, make_attrs):
        mock_session.execute = AsyncMock(return_value=_rowcount(0))
        with pytest.raises(StorageError):
            await SqlRouteRepository(mock_session).update_route(uuid4(), make_attrs())

    async def test_insert_stops_builds_rows(self, mock_session):
        route_id = uuid4()
        await SqlRouteRepository(mock_session).insert_stops([
            StopDraft(route_id=route_id, order_id=1, stop_number=1),
            StopDraft(route_id=route_id, order_id=2, stop_number=2),
        ])

        rows = mock_session.add_all.call_args.args[0]
        assert all(isinstance(r, RouteStop) for r in rows)
        assert [(r.order_id, r.stop_number) for r in rows] == [(1, 1), (2, 2)]

    async def test_integrity_error_becomes_constraint_violation(self, mock_session):
        mock_session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT INTO route_stops", {}, Exception("uq_route_stop_open_order"))
        )
        with pytest.raises(ConstraintViolation) as exc_info:
            await SqlRouteRepository(mock_session).insert_stops([
                StopDraft(route_id=uuid4(), order_id=1, stop_number=1),
            ])
        assert "uq_route_stop_open_order" in str(exc_info.value)

    async def test_routes_for_orders(self, mock_session):
        route_id = uuid4()
        result = MagicMock()
        result.all = MagicMock(return_value=[SimpleNamespace(order_id=3, route_id=route_id)])
        mock_session.execute = AsyncMock(return_value=result)

        assert await SqlRouteRepository(mock_session).routes_for_orders([3]) == {3: route_id}

    async def test_routes_for_orders_ignores_closed_stops(self, mock_session):
        mock_session.execute = AsyncMock(return_value=make_mock_result())
        await SqlRouteRepository(mock_session).routes_for_orders([3])

        query = mock_session.execute.call_args.args[0]
        assert "is_open" in str(query.whereclause)

    async def test_close_stops_returns_count(self, mock_session):
        mock_session.execute = AsyncMock(return_value=_rowcount(3))

        assert await SqlRouteRepository(mock_session).close_stops(uuid4()) == 3
        statement = mock_session.execute.call_args.args[0]
        assert statement.table.name == "route_stops"
        assert "is_open" in str(statement)

    async def test_get_missing_route(self, mock_session):
        mock_session.execute = AsyncMock(return_value=make_mock_result(scalar_value=None))
        assert await SqlRouteRepository(mock_session).get_route(uuid4()) is None

    async def test_transaction_uses_savepoint(self, mock_session):
        savepoint = MagicMock()
        mock_session.begin_nested = MagicMock(return_value=savepoint)

        with pytest.raises(RuntimeError):
            async with SqlRouteRepository(mock_session).transaction():
                raise RuntimeError("boom")

        mock_session.begin_nested.assert_called_once()
        savepoint.__aexit__.assert_awaited_once()
        assert savepoint.__aexit__.call_args.args[0] is RuntimeError


class TestSqlDriverDirectory:

    @staticmethod
    def _duty_result(row):
        result = MagicMock()
        result.first = MagicMock(return_value=row)
        return result

    async def test_eligibility_follows_duty_columns(self, mock_session):
        mock_session.execute = AsyncMock(return_value=self._duty_result(
            SimpleNamespace(is_active=True, driver_status=DriverStatus.ON_BREAK)
        ))

        drivers = SqlDriverDirectory(mock_session)
        assert await drivers.exists(uuid4()) is True
        assert await drivers.is_eligible(uuid4()) is False

    async def test_active_driver_eligible(self, mock_session):
        mock_session.execute = AsyncMock(return_value=self._duty_result(
            SimpleNamespace(is_active=True, driver_status=DriverStatus.ACTIVE)
        ))
        assert await SqlDriverDirectory(mock_session).is_eligible(uuid4()) is True

    async def test_unknown_driver(self, mock_session):
        mock_session.execute = AsyncMock(return_value=self._duty_result(None))
        drivers = SqlDriverDirectory(mock_session)
        assert await drivers.exists(uuid4()) is False
        assert await drivers.is_eligible(uuid4()) is False

    async def test_lookup_selects_columns_only(self, mock_session):
        mock_session.execute = AsyncMock(return_value=self._duty_result(None))
        await SqlDriverDirectory(mock_session).exists(uuid4())

        query = mock_session.execute.call_args.args[0]
        assert [c.name for c in query.selected_columns] == ["is_active", "driver_status"]
