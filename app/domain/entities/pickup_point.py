"""Pickup point entity: a named stop that routes can share."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.domain.value_objects.geo_point import GeoPoint


@dataclass
class PickupPoint:
    id: UUID | None
    name: str
    address: str
    location: GeoPoint | None = None
    landmark: str | None = None
    is_active: bool = True
    created_at: datetime | None = None

    def deactivate(self) -> None:
        self.is_active = False
