"""Pickup points: CRUD plus the attached-to-route deactivation guard."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.application.ports.pickup_point_repo import PickupPointFilter, PickupPointRepository
from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.pickup_point import PickupPoint
from app.domain.errors import InvalidStateError, NotFoundError
from app.domain.value_objects.geo_point import GeoPoint
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"name", "address", "location", "landmark"})


class PickupPointService:
    def __init__(
        self,
        pickup_point_repo: PickupPointRepository,
        stop_repo: RoutePickupPointRepository,
        uow: UnitOfWork,
    ):
        self._points = pickup_point_repo
        self._stops = stop_repo
        self._uow = uow

    async def create(self, pickup_point: PickupPoint) -> PickupPoint:
        async with self._uow.atomic():
            return await self._points.save(pickup_point)

    async def list(self, filters: PickupPointFilter, page: PageRequest) -> Page[PickupPoint]:
        return await self._points.list(filters, page)

    async def get(self, pickup_point_id: UUID) -> PickupPoint:
        point = await self._points.get_by_id(pickup_point_id)
        if point is None:
            raise NotFoundError("Pickup point not found")
        return point

    async def update(self, pickup_point_id: UUID, changes: dict[str, Any]) -> PickupPoint:
        point = await self.get(pickup_point_id)
        changes = dict(changes)
        if "latitude" in changes or "longitude" in changes:
            # A coordinate left out keeps its stored value
            current = point.location
            changes["location"] = GeoPoint.from_optional(
                changes.pop("latitude", current.latitude if current else None),
                changes.pop("longitude", current.longitude if current else None),
            )
        apply_changes(point, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._points.update(point)

    async def deactivate(self, pickup_point_id: UUID) -> PickupPoint:
        point = await self.get(pickup_point_id)
        if await self._stops.count_for_pickup_point(pickup_point_id) > 0:
            raise InvalidStateError("Cannot delete pickup point that is assigned to routes")
        point.deactivate()
        async with self._uow.atomic():
            updated = await self._points.update(point)
        logger.info("Deactivated pickup point %s", pickup_point_id)
        return updated
