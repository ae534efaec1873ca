"""Routes: CRUD, detail view and the deactivation guard."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.route_repo import RouteFilter, RouteRepository
from app.application.ports.route_vehicle_repo import RouteVehicleRepository
from app.application.ports.transport_assignment_repo import (
    AssignmentFilter,
    TransportAssignmentRepository,
)
from app.application.ports.transport_fee_repo import TransportFeeRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.route import Route
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "route_name", "route_code", "start_point", "end_point", "distance", "estimated_duration",
})


@dataclass
class RouteDetail:
    route: Route
    pickup_points: list[RoutePickupPoint]
    vehicle_assignments: list[RouteVehicleAssignment]
    transport_fees: list[TransportFeeMaster]


class RouteService:
    def __init__(
        self,
        route_repo: RouteRepository,
        stop_repo: RoutePickupPointRepository,
        route_vehicle_repo: RouteVehicleRepository,
        fee_repo: TransportFeeRepository,
        assignment_repo: TransportAssignmentRepository,
        uow: UnitOfWork,
    ):
        self._routes = route_repo
        self._stops = stop_repo
        self._route_vehicles = route_vehicle_repo
        self._fees = fee_repo
        self._assignments = assignment_repo
        self._uow = uow

    async def create(self, route: Route) -> Route:
        await self._ensure_unique(route.route_name, route.route_code)
        async with self._uow.atomic():
            saved = await self._routes.save(route)
        logger.info("Created route %s (%s)", saved.id, saved.route_name)
        return saved

    async def list(self, filters: RouteFilter, page: PageRequest) -> Page[Route]:
        return await self._routes.list(filters, page)

    async def get(self, route_id: UUID) -> Route:
        route = await self._routes.get_by_id(route_id)
        if route is None:
            raise NotFoundError("Route not found")
        return route

    async def get_detail(self, route_id: UUID) -> RouteDetail:
        """Route with ordered stops, active vehicles and active fee rates."""
        route = await self.get(route_id)
        return RouteDetail(
            route=route,
            pickup_points=await self._stops.list_for_route(route_id),
            vehicle_assignments=await self._route_vehicles.list_active_for_route(route_id),
            transport_fees=await self._fees.list_active_for_route(route_id),
        )

    async def update(self, route_id: UUID, changes: dict[str, Any]) -> Route:
        route = await self.get(route_id)
        new_name = changes.get("route_name")
        new_code = changes.get("route_code")
        await self._ensure_unique(
            new_name if new_name != route.route_name else None,
            new_code if new_code != route.route_code else None,
        )
        apply_changes(route, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._routes.update(route)

    async def deactivate(self, route_id: UUID) -> Route:
        route = await self.get(route_id)
        active = await self._assignments.count(
            AssignmentFilter(route_id=route_id, status=AssignmentStatus.ACTIVE)
        )
        if active > 0:
            raise InvalidStateError("Cannot delete route with active student assignments")
        route.deactivate()
        async with self._uow.atomic():
            updated = await self._routes.update(route)
        logger.info("Deactivated route %s", route_id)
        return updated

    async def _ensure_unique(self, route_name: str | None, route_code: str | None) -> None:
        if route_name and await self._routes.get_by_name(route_name):
            raise ConflictError("Route with this name already exists")
        if route_code and await self._routes.get_by_code(route_code):
            raise ConflictError("Route with this code already exists")
