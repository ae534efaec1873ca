"""School transport back office: FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.persistence.database import engine
from app.config import settings
from app.infrastructure.api.errors import register_exception_handlers
from app.infrastructure.api.routes_fee_masters import router as fee_masters_router
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_pickup_points import router as pickup_points_router
from app.infrastructure.api.routes_route_pickup_points import router as route_pickup_points_router
from app.infrastructure.api.routes_route_vehicles import router as route_vehicles_router
from app.infrastructure.api.routes_student_transport import router as student_transport_router
from app.infrastructure.api.routes_students import router as students_router
from app.infrastructure.api.routes_transport_routes import router as routes_router
from app.infrastructure.api.routes_vehicles import router as vehicles_router

logger = logging.getLogger(__name__)

TRANSPORT_PREFIX = "/api/transport"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="School Transport API",
        description="Routes, vehicles, pickup points, fee rates and student transport assignments",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router, prefix="/api")
    for router in (
        fee_masters_router,
        pickup_points_router,
        vehicles_router,
        routes_router,
        students_router,
        route_pickup_points_router,
        route_vehicles_router,
        student_transport_router,
    ):
        app.include_router(router, prefix=TRANSPORT_PREFIX)

    return app


app = create_app()
