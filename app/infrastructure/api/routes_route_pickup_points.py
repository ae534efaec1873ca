"""Route stop endpoints: attach, reorder and detach pickup points."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from app.application.services.route_pickup_point_service import RoutePickupPointService
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_route_pickup_point_service
from app.infrastructure.api.responses import ok
from app.infrastructure.api.schemas import RoutePickupPointCreate, RoutePickupPointUpdate
from app.infrastructure.api.serializers import serialize_route_pickup_point

router = APIRouter(prefix="/route-pickup-points", tags=["route-pickup-points"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def add_pickup_point_to_route(
    body: RoutePickupPointCreate,
    service: RoutePickupPointService = Depends(get_route_pickup_point_service),
):
    stop = await service.add(RoutePickupPoint(id=None, **body.model_dump()))
    return ok(serialize_route_pickup_point(stop), "Pickup point added to route successfully")


@router.get("/route/{route_id}", dependencies=[Depends(read_access)])
async def list_route_pickup_points(
    route_id: UUID, service: RoutePickupPointService = Depends(get_route_pickup_point_service)
):
    stops = await service.list_for_route(route_id)
    return ok(
        [serialize_route_pickup_point(s) for s in stops],
        "Route pickup points retrieved successfully",
    )


@router.put("/{stop_id}", dependencies=[Depends(write_access)])
async def update_route_pickup_point(
    stop_id: UUID,
    body: RoutePickupPointUpdate,
    service: RoutePickupPointService = Depends(get_route_pickup_point_service),
):
    stop = await service.update(stop_id, body.changes())
    return ok(serialize_route_pickup_point(stop), "Route pickup point updated successfully")


@router.delete("/{stop_id}", dependencies=[Depends(write_access)])
async def remove_pickup_point_from_route(
    stop_id: UUID, service: RoutePickupPointService = Depends(get_route_pickup_point_service)
):
    await service.remove(stop_id)
    return ok(None, "Pickup point removed from route successfully")
