"""Vehicles serving routes, optionally per shift."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from uuid import UUID

from app.application.ports.route_repo import RouteRepository
from app.application.ports.route_vehicle_repo import RouteVehicleFilter, RouteVehicleRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.ports.vehicle_repo import VehicleRepository
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.errors import ConflictError, NotFoundError
from app.domain.policies.timestamps import utc_now
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)


class RouteVehicleService:
    def __init__(
        self,
        route_repo: RouteRepository,
        vehicle_repo: VehicleRepository,
        route_vehicle_repo: RouteVehicleRepository,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._routes = route_repo
        self._vehicles = vehicle_repo
        self._route_vehicles = route_vehicle_repo
        self._uow = uow
        self._clock = clock

    async def assign(self, assignment: RouteVehicleAssignment) -> RouteVehicleAssignment:
        route = await self._routes.get_by_id(assignment.route_id)
        if route is None:
            raise NotFoundError("Route not found")
        vehicle = await self._vehicles.get_by_id(assignment.vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found")

        existing = await self._route_vehicles.find_active(
            assignment.route_id, assignment.vehicle_id, assignment.shift
        )
        if existing is not None:
            raise ConflictError("This vehicle is already assigned to this route for this shift")

        async with self._uow.atomic():
            saved = await self._route_vehicles.save(assignment)
        saved.route = route
        saved.vehicle = vehicle
        logger.info(
            "Vehicle %s assigned to route %s (shift=%s)",
            vehicle.vehicle_number, route.route_name,
            assignment.shift.value if assignment.shift else None,
        )
        return saved

    async def list(
        self, filters: RouteVehicleFilter, page: PageRequest
    ) -> Page[RouteVehicleAssignment]:
        return await self._route_vehicles.list(filters, page)

    async def deactivate(self, assignment_id: UUID) -> RouteVehicleAssignment:
        assignment = await self._route_vehicles.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        assignment.deactivate(self._clock())
        async with self._uow.atomic():
            updated = await self._route_vehicles.update(assignment)
        logger.info("Deactivated vehicle assignment %s", assignment_id)
        return updated
