"""Route endpoints: CRUD plus the detail view with stops, vehicles and fees."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.route_repo import RouteFilter
from app.application.services.route_service import RouteService
from app.domain.entities.route import Route
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_route_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import RouteCreate, RouteUpdate
from app.infrastructure.api.serializers import serialize_route, serialize_route_detail

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def create_route(body: RouteCreate, service: RouteService = Depends(get_route_service)):
    route = await service.create(Route(id=None, **body.model_dump()))
    return ok(serialize_route(route), "Route created successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_routes(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    service: RouteService = Depends(get_route_service),
):
    result = await service.list(
        RouteFilter(is_active=is_active, search=search), PageRequest.of(page, limit)
    )
    return paginated(result, serialize_route, "Routes retrieved successfully")


@router.get("/{route_id}", dependencies=[Depends(read_access)])
async def get_route(route_id: UUID, service: RouteService = Depends(get_route_service)):
    detail = await service.get_detail(route_id)
    return ok(serialize_route_detail(detail), "Route retrieved successfully")


@router.put("/{route_id}", dependencies=[Depends(write_access)])
async def update_route(
    route_id: UUID, body: RouteUpdate, service: RouteService = Depends(get_route_service)
):
    route = await service.update(route_id, body.changes())
    return ok(serialize_route(route), "Route updated successfully")


@router.delete("/{route_id}", dependencies=[Depends(write_access)])
async def delete_route(route_id: UUID, service: RouteService = Depends(get_route_service)):
    route = await service.deactivate(route_id)
    return ok(serialize_route(route), "Route deactivated successfully")
