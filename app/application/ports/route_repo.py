"""Port interface for route persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.route import Route
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class RouteFilter:
    is_active: bool | None = None
    search: str | None = None


class RouteRepository(ABC):
    @abstractmethod
    async def save(self, route: Route) -> Route:
        ...

    @abstractmethod
    async def get_by_id(self, route_id: UUID) -> Route | None:
        ...

    @abstractmethod
    async def get_by_name(self, route_name: str) -> Route | None:
        ...

    @abstractmethod
    async def get_by_code(self, route_code: str) -> Route | None:
        ...

    @abstractmethod
    async def list(self, filters: RouteFilter, page: PageRequest) -> Page[Route]:
        """Newest first; each route carries stop/vehicle/student counts."""
        ...

    @abstractmethod
    async def update(self, route: Route) -> Route:
        ...
