"""Vehicle endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.vehicle_repo import VehicleFilter
from app.application.services.vehicle_service import VehicleService
from app.domain.entities.vehicle import Vehicle
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_vehicle_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import VehicleCreate, VehicleUpdate
from app.infrastructure.api.serializers import serialize_vehicle

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def create_vehicle(body: VehicleCreate, service: VehicleService = Depends(get_vehicle_service)):
    vehicle = await service.create(Vehicle(id=None, **body.model_dump()))
    return ok(serialize_vehicle(vehicle), "Vehicle created successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_vehicles(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    service: VehicleService = Depends(get_vehicle_service),
):
    result = await service.list(
        VehicleFilter(is_active=is_active, search=search), PageRequest.of(page, limit)
    )
    return paginated(result, serialize_vehicle, "Vehicles retrieved successfully")


@router.get("/{vehicle_id}", dependencies=[Depends(read_access)])
async def get_vehicle(vehicle_id: UUID, service: VehicleService = Depends(get_vehicle_service)):
    vehicle = await service.get(vehicle_id)
    return ok(serialize_vehicle(vehicle), "Vehicle retrieved successfully")


@router.put("/{vehicle_id}", dependencies=[Depends(write_access)])
async def update_vehicle(
    vehicle_id: UUID, body: VehicleUpdate, service: VehicleService = Depends(get_vehicle_service)
):
    vehicle = await service.update(vehicle_id, body.changes())
    return ok(serialize_vehicle(vehicle), "Vehicle updated successfully")


@router.delete("/{vehicle_id}", dependencies=[Depends(write_access)])
async def delete_vehicle(vehicle_id: UUID, service: VehicleService = Depends(get_vehicle_service)):
    vehicle = await service.deactivate(vehicle_id)
    return ok(serialize_vehicle(vehicle), "Vehicle deactivated successfully")
