"""TransportFeeMaster: monthly transport rate for a route (or zone) and year."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.domain.entities.route import Route


@dataclass
class TransportFeeMaster:
    id: UUID | None
    monthly_fee: Decimal
    academic_year: str
    route_id: UUID | None = None
    zone_name: str | None = None
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    route: Route | None = None

    def deactivate(self) -> None:
        self.is_active = False
