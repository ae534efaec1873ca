"""Port interface for student transport assignments."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.transport_assignment import StudentTransportAssignment
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class AssignmentFilter:
    student_id: UUID | None = None
    route_id: UUID | None = None
    pickup_point_id: UUID | None = None
    status: AssignmentStatus | None = None


class TransportAssignmentRepository(ABC):
    @abstractmethod
    async def save(self, assignment: StudentTransportAssignment) -> StudentTransportAssignment:
        ...

    @abstractmethod
    async def get_by_id(self, assignment_id: UUID) -> StudentTransportAssignment | None:
        """Load with student, route and pickup point attached."""
        ...

    @abstractmethod
    async def find_active_for_student(self, student_id: UUID) -> StudentTransportAssignment | None:
        ...

    @abstractmethod
    async def list(
        self, filters: AssignmentFilter, page: PageRequest
    ) -> Page[StudentTransportAssignment]:
        """Newest first, with student, route and pickup point attached."""
        ...

    @abstractmethod
    async def count(self, filters: AssignmentFilter) -> int:
        ...

    @abstractmethod
    async def update(self, assignment: StudentTransportAssignment) -> StudentTransportAssignment:
        ...
