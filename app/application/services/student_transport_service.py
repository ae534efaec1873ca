"""Read, edit and end student transport assignments.

Creating an assignment goes through ``AssignStudentTransportUseCase``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable
from uuid import UUID

from app.application.ports.transport_assignment_repo import (
    AssignmentFilter,
    TransportAssignmentRepository,
)
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.transport_assignment import StudentTransportAssignment
from app.domain.errors import NotFoundError
from app.domain.policies.timestamps import utc_now
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

# Route membership of a new pickup point is not re-checked on update.
UPDATABLE_FIELDS = frozenset({"pickup_point_id", "shift", "valid_to"})


class StudentTransportService:
    def __init__(
        self,
        assignment_repo: TransportAssignmentRepository,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._assignments = assignment_repo
        self._uow = uow
        self._clock = clock

    async def list(
        self, filters: AssignmentFilter, page: PageRequest
    ) -> Page[StudentTransportAssignment]:
        return await self._assignments.list(filters, page)

    async def get(self, assignment_id: UUID) -> StudentTransportAssignment:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise NotFoundError("Transport assignment not found")
        return assignment

    async def update(
        self, assignment_id: UUID, changes: dict[str, Any]
    ) -> StudentTransportAssignment:
        assignment = await self.get(assignment_id)
        apply_changes(assignment, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            await self._assignments.update(assignment)
        return await self.get(assignment_id)

    async def deactivate(self, assignment_id: UUID) -> StudentTransportAssignment:
        assignment = await self.get(assignment_id)
        assignment.deactivate(self._clock())
        async with self._uow.atomic():
            updated = await self._assignments.update(assignment)
        logger.info("Deactivated transport assignment %s", assignment_id)
        return updated
