"""Port interface for transport fee rates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class TransportFeeFilter:
    route_id: UUID | None = None
    academic_year: str | None = None
    is_active: bool | None = None


class TransportFeeRepository(ABC):
    @abstractmethod
    async def save(self, fee: TransportFeeMaster) -> TransportFeeMaster:
        ...

    @abstractmethod
    async def get_by_id(self, fee_id: UUID) -> TransportFeeMaster | None:
        ...

    @abstractmethod
    async def find_active(self, route_id: UUID, academic_year: str) -> TransportFeeMaster | None:
        """The active rate for a route in an academic year, if any."""
        ...

    @abstractmethod
    async def list(self, filters: TransportFeeFilter, page: PageRequest) -> Page[TransportFeeMaster]:
        ...

    @abstractmethod
    async def list_active_for_route(self, route_id: UUID) -> list[TransportFeeMaster]:
        ...

    @abstractmethod
    async def update(self, fee: TransportFeeMaster) -> TransportFeeMaster:
        ...
