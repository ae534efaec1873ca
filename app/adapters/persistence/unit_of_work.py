"""SQLAlchemy unit of work bound to the request session."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.ports.unit_of_work import UnitOfWork
from app.domain.errors import ConflictError

logger = logging.getLogger(__name__)


class SqlUnitOfWork(UnitOfWork):
    """Commits the session's pending work on success, rolls it back otherwise.

    The session may already be inside an auto-begun transaction from the reads
    that preceded the block, so this never calls ``session.begin()``.
    """

    def __init__(self, session: AsyncSession):
        self._s = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        try:
            yield
            await self._s.commit()
        except IntegrityError as e:
            await self._s.rollback()
            logger.warning("Integrity violation, rolled back: %s", e.orig)
            raise ConflictError("Record conflicts with existing data") from e
        except BaseException:
            await self._s.rollback()
            raise
