"""RoutePickupPoint: ordered membership of a pickup point in a route."""

from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route


@dataclass
class RoutePickupPoint:
    id: UUID | None
    route_id: UUID
    pickup_point_id: UUID
    sequence_order: int
    estimated_time: str | None = None
    distance_from_start: float | None = None
    route: Route | None = None
    pickup_point: PickupPoint | None = None
