"""
Stop sequencing for route assignment.

Turns the operator's ordered selection into numbered stop drafts. Stop
order is exactly selection order: no clustering, no distance-based
reordering.
"""
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Optional
from uuid import UUID

from routedesk.models.enums import StopStatus
from routedesk.services.assignment.exceptions import DuplicateOrder, InvalidSelection
from routedesk.services.assignment.types import StopDraft


def check_selection(order_ids: Sequence[int]) -> None:
    """
    Validate a selection without building stops.

    Raises:
        InvalidSelection: If the selection is empty
        DuplicateOrder: If an order id appears more than once
    """
    if not order_ids:
        raise InvalidSelection()

    seen: set[int] = set()
    for order_id in order_ids:
        if order_id in seen:
            raise DuplicateOrder(order_id)
        seen.add(order_id)


def sequence_stops(
    order_ids: Sequence[int],
    route_id: UUID,
    arrival_times: Optional[Mapping[int, datetime]] = None,
) -> list[StopDraft]:
    """
    Build one pending stop per selected order, numbered from 1.

    Args:
        order_ids: Selected order ids in operator-selection order
        route_id: Route the stops belong to
        arrival_times: Optional estimated arrival per order id

    Returns:
        Stop drafts with ``stop_number`` equal to the 1-based position

    Raises:
        InvalidSelection: If the selection is empty
        DuplicateOrder: If an order id appears more than once
    """
    check_selection(order_ids)
    arrival_times = arrival_times or {}

    return [
        StopDraft(
            route_id=route_id,
            order_id=order_id,
            stop_number=position,
            status=StopStatus.PENDING,
            estimated_arrival_time=arrival_times.get(order_id),
        )
        for position, order_id in enumerate(order_ids, start=1)
    ]
