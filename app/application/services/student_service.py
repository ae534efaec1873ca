"""Student records: CRUD plus the soft-delete guard."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from app.application.ports.student_repo import StudentFilter, StudentRepository
from app.application.ports.transport_assignment_repo import (
    AssignmentFilter,
    TransportAssignmentRepository,
)
from app.application.ports.unit_of_work import UnitOfWork
from app.application.services.changes import apply_changes
from app.domain.entities.student import Student
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.pagination import Page, PageRequest

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10

UPDATABLE_FIELDS = frozenset({
    "admission_number", "first_name", "last_name", "class_name", "section",
    "roll_number", "email", "phone", "parent_name", "parent_phone", "address",
})


class StudentService:
    def __init__(
        self,
        student_repo: StudentRepository,
        assignment_repo: TransportAssignmentRepository,
        uow: UnitOfWork,
    ):
        self._students = student_repo
        self._assignments = assignment_repo
        self._uow = uow

    async def create(self, student: Student) -> Student:
        if await self._students.get_by_admission_number(student.admission_number):
            raise ConflictError("Student with this admission number already exists")
        async with self._uow.atomic():
            saved = await self._students.save(student)
        logger.info("Created student %s (%s)", saved.id, saved.admission_number)
        return saved

    async def list(self, filters: StudentFilter, page: PageRequest) -> Page[Student]:
        return await self._students.list(filters, page)

    async def get(self, student_id: UUID) -> Student:
        student = await self._students.get_by_id(student_id)
        if student is None:
            raise NotFoundError("Student not found")
        return student

    async def update(self, student_id: UUID, changes: dict[str, Any]) -> Student:
        student = await self.get(student_id)
        new_number = changes.get("admission_number")
        if new_number and new_number != student.admission_number:
            if await self._students.get_by_admission_number(new_number):
                raise ConflictError("Another student with this admission number already exists")
        apply_changes(student, changes, UPDATABLE_FIELDS)
        async with self._uow.atomic():
            return await self._students.update(student)

    async def deactivate(self, student_id: UUID) -> Student:
        student = await self.get(student_id)
        active = await self._assignments.count(
            AssignmentFilter(student_id=student_id, status=AssignmentStatus.ACTIVE)
        )
        if active > 0:
            raise InvalidStateError("Cannot delete student with active transport assignments")
        student.deactivate()
        async with self._uow.atomic():
            updated = await self._students.update(student)
        logger.info("Deactivated student %s", student_id)
        return updated

    async def search(self, query: str | None) -> list[Student]:
        """Typeahead over active students; blank queries return nothing."""
        if not query or not query.strip():
            return []
        return await self._students.search_active(query.strip(), SEARCH_LIMIT)
