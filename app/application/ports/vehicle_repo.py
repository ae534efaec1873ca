"""Port interface for vehicle persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.vehicle import Vehicle
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class VehicleFilter:
    is_active: bool | None = None
    search: str | None = None


class VehicleRepository(ABC):
    @abstractmethod
    async def save(self, vehicle: Vehicle) -> Vehicle:
        ...

    @abstractmethod
    async def get_by_id(self, vehicle_id: UUID) -> Vehicle | None:
        ...

    @abstractmethod
    async def get_by_number(self, vehicle_number: str) -> Vehicle | None:
        ...

    @abstractmethod
    async def list(self, filters: VehicleFilter, page: PageRequest) -> Page[Vehicle]:
        ...

    @abstractmethod
    async def update(self, vehicle: Vehicle) -> Vehicle:
        ...
