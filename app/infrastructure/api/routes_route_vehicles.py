"""Route vehicle endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.route_vehicle_repo import RouteVehicleFilter
from app.application.services.route_vehicle_service import RouteVehicleService
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_route_vehicle_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import RouteVehicleCreate
from app.infrastructure.api.serializers import serialize_route_vehicle

router = APIRouter(prefix="/route-vehicles", tags=["route-vehicles"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def assign_vehicle_to_route(
    body: RouteVehicleCreate,
    service: RouteVehicleService = Depends(get_route_vehicle_service),
):
    assignment = await service.assign(RouteVehicleAssignment(id=None, **body.model_dump()))
    return ok(serialize_route_vehicle(assignment), "Vehicle assigned to route successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_route_vehicles(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    route_id: UUID | None = Query(None, alias="routeId"),
    vehicle_id: UUID | None = Query(None, alias="vehicleId"),
    is_active: bool | None = Query(None, alias="isActive"),
    service: RouteVehicleService = Depends(get_route_vehicle_service),
):
    result = await service.list(
        RouteVehicleFilter(route_id=route_id, vehicle_id=vehicle_id, is_active=is_active),
        PageRequest.of(page, limit),
    )
    return paginated(result, serialize_route_vehicle, "Route vehicles retrieved successfully")


@router.put("/{assignment_id}/deactivate", dependencies=[Depends(write_access)])
async def deactivate_route_vehicle(
    assignment_id: UUID, service: RouteVehicleService = Depends(get_route_vehicle_service)
):
    assignment = await service.deactivate(assignment_id)
    return ok(serialize_route_vehicle(assignment), "Vehicle assignment deactivated successfully")
