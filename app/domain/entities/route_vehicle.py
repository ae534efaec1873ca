"""RouteVehicleAssignment: a vehicle serving a route for a time window."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from app.domain.entities.route import Route
from app.domain.entities.vehicle import Vehicle
from app.domain.value_objects.enums import Shift


@dataclass
class RouteVehicleAssignment:
    id: UUID | None
    route_id: UUID
    vehicle_id: UUID
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    shift: Shift | None = None
    is_active: bool = True
    created_at: datetime | None = None
    route: Route | None = None
    vehicle: Vehicle | None = None

    def deactivate(self, at: datetime) -> None:
        self.is_active = False
        self.valid_to = at
