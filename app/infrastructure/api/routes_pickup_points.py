"""Pickup point endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.pickup_point_repo import PickupPointFilter
from app.application.services.pickup_point_service import PickupPointService
from app.domain.entities.pickup_point import PickupPoint
from app.domain.value_objects.geo_point import GeoPoint
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_pickup_point_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import PickupPointCreate, PickupPointUpdate
from app.infrastructure.api.serializers import serialize_pickup_point

router = APIRouter(prefix="/pickup-points", tags=["pickup-points"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def create_pickup_point(
    body: PickupPointCreate, service: PickupPointService = Depends(get_pickup_point_service)
):
    point = await service.create(
        PickupPoint(
            id=None,
            name=body.name,
            address=body.address,
            location=GeoPoint.from_optional(body.latitude, body.longitude),
            landmark=body.landmark,
        )
    )
    return ok(serialize_pickup_point(point), "Pickup point created successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_pickup_points(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    service: PickupPointService = Depends(get_pickup_point_service),
):
    result = await service.list(
        PickupPointFilter(is_active=is_active, search=search), PageRequest.of(page, limit)
    )
    return paginated(result, serialize_pickup_point, "Pickup points retrieved successfully")


@router.get("/{pickup_point_id}", dependencies=[Depends(read_access)])
async def get_pickup_point(
    pickup_point_id: UUID, service: PickupPointService = Depends(get_pickup_point_service)
):
    point = await service.get(pickup_point_id)
    return ok(serialize_pickup_point(point), "Pickup point retrieved successfully")


@router.put("/{pickup_point_id}", dependencies=[Depends(write_access)])
async def update_pickup_point(
    pickup_point_id: UUID,
    body: PickupPointUpdate,
    service: PickupPointService = Depends(get_pickup_point_service),
):
    point = await service.update(pickup_point_id, body.changes())
    return ok(serialize_pickup_point(point), "Pickup point updated successfully")


@router.delete("/{pickup_point_id}", dependencies=[Depends(write_access)])
async def delete_pickup_point(
    pickup_point_id: UUID, service: PickupPointService = Depends(get_pickup_point_service)
):
    point = await service.deactivate(pickup_point_id)
    return ok(serialize_pickup_point(point), "Pickup point deactivated successfully")
