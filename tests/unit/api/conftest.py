"""HTTP fixtures: the real app with services wired to the in-memory world."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.adapters.persistence.database import get_session
from app.config import settings
from app.infrastructure.api import dependencies as deps
from app.infrastructure.api.auth import create_access_token
from app.main import create_app


class _Result:
    def scalar(self):
        return 1


class FakeSession:
    """Stands in for AsyncSession on the health endpoint."""

    def __init__(self, healthy: bool = True):
        self.healthy = healthy

    async def execute(self, statement):
        if not self.healthy:
            raise OperationalError(str(statement), {}, Exception("connection refused"))
        return _Result()


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def app(world, session, monkeypatch) -> FastAPI:
    monkeypatch.setattr(settings, "auth_enabled", False)
    monkeypatch.setattr(settings, "current_academic_year", "2024-2025")

    application = create_app()
    overrides = {
        get_session: lambda: session,
        deps.get_student_service: world.student_service,
        deps.get_route_service: world.route_service,
        deps.get_vehicle_service: world.vehicle_service,
        deps.get_pickup_point_service: world.pickup_point_service,
        deps.get_fee_master_service: world.fee_master_service,
        deps.get_route_pickup_point_service: world.route_pickup_point_service,
        deps.get_route_vehicle_service: world.route_vehicle_service,
        deps.get_student_transport_service: world.student_transport_service,
        deps.get_assign_student_transport_uc: world.assign_use_case,
    }
    application.dependency_overrides.update(overrides)
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_on(app, monkeypatch):
    """Turn role checks back on; requested after the app so it wins."""
    monkeypatch.setattr(settings, "auth_enabled", True)


@pytest.fixture
def bearer():
    def _headers(role: str, subject: str = "user-1") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(subject, role)}"}

    return _headers
