"""Transport fee master endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.transport_fee_repo import TransportFeeFilter
from app.application.services.fee_master_service import FeeMasterService
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import fee_write_access, read_access
from app.infrastructure.api.dependencies import get_fee_master_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import FeeMasterCreate, FeeMasterUpdate
from app.infrastructure.api.serializers import serialize_fee_master

router = APIRouter(prefix="/fee-master", tags=["fee-master"])


@router.post("", status_code=201, dependencies=[Depends(fee_write_access)])
async def create_fee_master(
    body: FeeMasterCreate, service: FeeMasterService = Depends(get_fee_master_service)
):
    fee = await service.create(TransportFeeMaster(id=None, **body.model_dump()))
    return ok(serialize_fee_master(fee), "Fee master created successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_fee_masters(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    route_id: UUID | None = Query(None, alias="routeId"),
    academic_year: str | None = Query(None, alias="academicYear"),
    is_active: bool | None = Query(None, alias="isActive"),
    service: FeeMasterService = Depends(get_fee_master_service),
):
    result = await service.list(
        TransportFeeFilter(route_id=route_id, academic_year=academic_year, is_active=is_active),
        PageRequest.of(page, limit),
    )
    return paginated(result, serialize_fee_master, "Fee masters retrieved successfully")


@router.get("/{fee_id}", dependencies=[Depends(read_access)])
async def get_fee_master(fee_id: UUID, service: FeeMasterService = Depends(get_fee_master_service)):
    fee = await service.get(fee_id)
    return ok(serialize_fee_master(fee), "Fee master retrieved successfully")


@router.put("/{fee_id}", dependencies=[Depends(fee_write_access)])
async def update_fee_master(
    fee_id: UUID,
    body: FeeMasterUpdate,
    service: FeeMasterService = Depends(get_fee_master_service),
):
    fee = await service.update(fee_id, body.changes())
    return ok(serialize_fee_master(fee), "Fee master updated successfully")


@router.delete("/{fee_id}", dependencies=[Depends(fee_write_access)])
async def delete_fee_master(
    fee_id: UUID, service: FeeMasterService = Depends(get_fee_master_service)
):
    fee = await service.deactivate(fee_id)
    return ok(serialize_fee_master(fee), "Fee master deactivated successfully")
