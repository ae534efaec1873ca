"""Port interface for vehicle-to-route assignments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.value_objects.enums import Shift
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class RouteVehicleFilter:
    route_id: UUID | None = None
    vehicle_id: UUID | None = None
    is_active: bool | None = None


class RouteVehicleRepository(ABC):
    @abstractmethod
    async def save(self, assignment: RouteVehicleAssignment) -> RouteVehicleAssignment:
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: UUID) -> RouteVehicleAssignment | None:
        ...

    @abstractmethod
    async def find_active(
        self, route_id: UUID, vehicle_id: UUID, shift: Shift | None
    ) -> RouteVehicleAssignment | None:
        ...

    @abstractmethod
    async def list(
        self, filters: RouteVehicleFilter, page: PageRequest
    ) -> Page[RouteVehicleAssignment]:
        ...

    @abstractmethod
    async def list_active_for_route(self, route_id: UUID) -> list[RouteVehicleAssignment]:
        ...

    @abstractmethod
    async def count_active_for_vehicle(self, vehicle_id: UUID) -> int:
        ...

    @abstractmethod
    async def update(self, assignment: RouteVehicleAssignment) -> RouteVehicleAssignment:
        ...
