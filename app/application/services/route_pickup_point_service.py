"""Ordered stops of a route: add, list, reorder, remove."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.application.ports.pickup_point_repo import PickupPointRepository
from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.route_repo import RouteRepository
from app.application.ports.transport_assignment_repo import (
    AssignmentFilter,
    TransportAssignmentRepository,
)
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.value_objects.enums import AssignmentStatus

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"sequence_order", "estimated_time", "distance_from_start"})


class RoutePickupPointService:
    def __init__(
        self,
        route_repo: RouteRepository,
        pickup_point_repo: PickupPointRepository,
        stop_repo: RoutePickupPointRepository,
        assignment_repo: TransportAssignmentRepository,
        uow: UnitOfWork,
    ):
        self._routes = route_repo
        self._points = pickup_point_repo
        self._stops = stop_repo
        self._assignments = assignment_repo
        self._uow = uow

    async def add(self, stop: RoutePickupPoint) -> RoutePickupPoint:
        route = await self._routes.get_by_id(stop.route_id)
        if route is None:
            raise NotFoundError("Route not found")
        point = await self._points.get_by_id(stop.pickup_point_id)
        if point is None:
            raise NotFoundError("Pickup point not found")
        if await self._stops.find(stop.route_id, stop.pickup_point_id):
            raise ConflictError("This pickup point is already added to this route")

        async with self._uow.atomic():
            saved = await self._stops.save(stop)
        saved.route = route
        saved.pickup_point = point
        logger.info(
            "Added pickup point %s to route %s at position %d",
            stop.pickup_point_id, stop.route_id, stop.sequence_order,
        )
        return saved

    async def list_for_route(self, route_id: UUID) -> list[RoutePickupPoint]:
        if await self._routes.get_by_id(route_id) is None:
            raise NotFoundError("Route not found")
        return await self._stops.list_for_route(route_id)

    async def update(self, stop_id: UUID, changes: dict[str, Any]) -> RoutePickupPoint:
        stop = await self._get(stop_id)
        apply_changes(stop, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._stops.update(stop)

    async def remove(self, stop_id: UUID) -> None:
        stop = await self._get(stop_id)
        in_use = await self._assignments.count(
            AssignmentFilter(
                route_id=stop.route_id,
                pickup_point_id=stop.pickup_point_id,
                status=AssignmentStatus.ACTIVE,
            )
        )
        if in_use > 0:
            raise InvalidStateError("Cannot remove pickup point with active student assignments")
        async with self._uow.atomic():
            await self._stops.delete(stop_id)
        logger.info("Removed pickup point %s from route %s", stop.pickup_point_id, stop.route_id)

    async def _get(self, stop_id: UUID) -> RoutePickupPoint:
        stop = await self._stops.get_by_id(stop_id)
        if stop is None:
            raise NotFoundError("Route pickup point not found")
        return stop
