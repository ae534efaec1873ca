"""Port interface for the ordered route <-> pickup point join."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from app.domain.entities.route_pickup_point import RoutePickupPoint


class RoutePickupPointRepository(ABC):
    @abstractmethod
    async def save(self, stop: RoutePickupPoint) -> RoutePickupPoint:
        ...

    @abstractmethod
    async def get_by_id(self, stop_id: UUID) -> RoutePickupPoint | None:
        ...

    @abstractmethod
    async def find(self, route_id: UUID, pickup_point_id: UUID) -> RoutePickupPoint | None:
        """Membership check used by the assignment workflow."""
        ...

    @abstractmethod
    async def list_for_route(self, route_id: UUID) -> list[RoutePickupPoint]:
        """Stops of a route with their pickup point, by sequence_order ascending."""
        ...

    @abstractmethod
    async def count_for_pickup_point(self, pickup_point_id: UUID) -> int:
        ...

    @abstractmethod
    async def update(self, stop: RoutePickupPoint) -> RoutePickupPoint:
        ...

    @abstractmethod
    async def delete(self, stop_id: UUID) -> None:
        ...
