"""Port interface for student persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

from app.domain.entities.student import Student
from app.domain.value_objects.pagination import Page, PageRequest


@dataclass(frozen=True)
class StudentFilter:
    is_active: bool | None = None
    search: str | None = None


class StudentRepository(ABC):
    @abstractmethod
    async def save(self, student: Student) -> Student:
        ...

    @abstractmethod
    async def get_by_id(self, student_id: UUID) -> Student | None:
        ...

    @abstractmethod
    async def get_by_admission_number(self, admission_number: str) -> Student | None:
        ...

    @abstractmethod
    async def list(self, filters: StudentFilter, page: PageRequest) -> Page[Student]:
        ...

    @abstractmethod
    async def search_active(self, query: str, limit: int) -> list[Student]:
        """Active students whose admission number or names contain *query*."""
        ...

    @abstractmethod
    async def update(self, student: Student) -> Student:
        ...
