"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.infrastructure.api.responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Check API and database connectivity."""
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        db_status = "connected"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check could not reach the database: %s", e)
        db_status = f"error: {e}"

    return ok(
        {
            "status": "ok" if db_status == "connected" else "degraded",
            "database": db_status,
            "service": "School Transport API",
        },
        "Server is running",
    )
