"""Vehicles: CRUD plus the active-route deactivation guard."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.application.ports.route_vehicle_repo import RouteVehicleRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.ports.vehicle_repo import VehicleFilter, VehicleRepository
from app.application.services.changes import apply_changes
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "vehicle_number", "vehicle_type", "capacity", "driver_name", "driver_phone",
    "driver_license", "helper_name", "helper_phone", "registration_number",
    "insurance_expiry", "fitness_expiry",
})


class VehicleService:
    def __init__(
        self,
        vehicle_repo: VehicleRepository,
        route_vehicle_repo: RouteVehicleRepository,
        uow: UnitOfWork,
    ):
        self._vehicles = vehicle_repo
        self._route_vehicles = route_vehicle_repo
        self._uow = uow

    async def create(self, vehicle: Vehicle) -> Vehicle:
        if await self._vehicles.get_by_number(vehicle.vehicle_number):
            raise ConflictError("Vehicle with this number already exists")
        async with self._uow.atomic():
            saved = await self._vehicles.save(vehicle)
        logger.info("Created vehicle %s (%s)", saved.id, saved.vehicle_number)
        return saved

    async def list(self, filters: VehicleFilter, page: PageRequest) -> Page[Vehicle]:
        return await self._vehicles.list(filters, page)

    async def get(self, vehicle_id: UUID) -> Vehicle:
        vehicle = await self._vehicles.get_by_id(vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found")
        return vehicle

    async def update(self, vehicle_id: UUID, changes: dict[str, Any]) -> Vehicle:
        vehicle = await self.get(vehicle_id)
        new_number = changes.get("vehicle_number")
        if new_number:
            existing = await self._vehicles.get_by_number(new_number)
            if existing is not None and existing.id != vehicle_id:
                raise ConflictError("Vehicle with this number already exists")
        apply_changes(vehicle, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._vehicles.update(vehicle)

    async def deactivate(self, vehicle_id: UUID) -> Vehicle:
        vehicle = await self.get(vehicle_id)
        if await self._route_vehicles.count_active_for_vehicle(vehicle_id) > 0:
            raise InvalidStateError("Cannot delete vehicle with active route assignments")
        vehicle.deactivate()
        async with self._uow.atomic():
            updated = await self._vehicles.update(vehicle)
        logger.info("Deactivated vehicle %s", vehicle_id)
        return updated
