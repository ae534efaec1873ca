"""Port interface for pickup point persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.pickup_point import PickupPoint
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class PickupPointFilter:
    is_active: bool | None = None
    search: str | None = None


class PickupPointRepository(ABC):
    @abstractmethod
    async def save(self, pickup_point: PickupPoint) -> PickupPoint:
        ...

    @abstractmethod
    async def get_by_id(self, pickup_point_id: UUID) -> PickupPoint | None:
        ...

    @abstractmethod
    async def list(self, filters: PickupPointFilter, page: PageRequest) -> Page[PickupPoint]:
        ...

    @abstractmethod
    async def update(self, pickup_point: PickupPoint) -> PickupPoint:
        ...
