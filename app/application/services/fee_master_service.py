"""Transport fee rates per route (or zone) and academic year."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.application.ports.route_repo import RouteRepository
from app.application.ports.transport_fee_repo import TransportFeeFilter, TransportFeeRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    ValidationFailedError,
)
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "route_id", "zone_name", "monthly_fee", "description", "academic_year",
})

SCOPE_REQUIRED = "Either routeId or zoneName must be provided"


def _require_scope(route_id: UUID | None, zone_name: str | None) -> None:
    if route_id is None and not zone_name:
        raise ValidationFailedError(
            SCOPE_REQUIRED,
            [FieldError("routeId", SCOPE_REQUIRED), FieldError("zoneName", SCOPE_REQUIRED)],
        )


class FeeMasterService:
    def __init__(
        self,
        fee_repo: TransportFeeRepository,
        route_repo: RouteRepository,
        uow: UnitOfWork,
    ):
        self._fees = fee_repo
        self._routes = route_repo
        self._uow = uow

    async def create(self, fee: TransportFeeMaster) -> TransportFeeMaster:
        _require_scope(fee.route_id, fee.zone_name)
        if fee.route_id is not None:
            await self._ensure_route_free(fee.route_id, fee.academic_year, exclude_id=None)

        async with self._uow.atomic():
            saved = await self._fees.save(fee)
        logger.info(
            "Created transport fee %s for route=%s zone=%s year=%s",
            saved.id, saved.route_id, saved.zone_name, saved.academic_year,
        )
        return saved

    async def list(self, filters: TransportFeeFilter, page: PageRequest) -> Page[TransportFeeMaster]:
        return await self._fees.list(filters, page)

    async def get(self, fee_id: UUID) -> TransportFeeMaster:
        fee = await self._fees.get_by_id(fee_id)
        if fee is None:
            raise NotFoundError("Fee master not found")
        return fee

    async def update(self, fee_id: UUID, changes: dict[str, Any]) -> TransportFeeMaster:
        fee = await self.get(fee_id)
        route_id = changes.get("route_id", fee.route_id)
        _require_scope(route_id, changes.get("zone_name", fee.zone_name))
        academic_year = changes.get("academic_year") or fee.academic_year
        moved = route_id != fee.route_id or academic_year != fee.academic_year
        if fee.is_active and route_id is not None and moved:
            await self._ensure_route_free(route_id, academic_year, exclude_id=fee.id)

        apply_changes(fee, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._fees.update(fee)

    async def deactivate(self, fee_id: UUID) -> TransportFeeMaster:
        fee = await self.get(fee_id)
        fee.deactivate()
        async with self._uow.atomic():
            updated = await self._fees.update(fee)
        logger.info("Deactivated transport fee %s", fee_id)
        return updated

    async def _ensure_route_free(
        self, route_id: UUID, academic_year: str, exclude_id: UUID | None
    ) -> None:
        if await self._routes.get_by_id(route_id) is None:
            raise NotFoundError("Route not found")
        existing = await self._fees.find_active(route_id, academic_year)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("Fee master already exists for this route and academic year")
