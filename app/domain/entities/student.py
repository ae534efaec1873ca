"""Student entity: a pupil who may use school transport."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Student:
    id: UUID | None
    admission_number: str
    first_name: str
    last_name: str
    class_name: str
    section: str | None = None
    roll_number: str | None = None
    email: str | None = None
    phone: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match used by the typeahead search."""
        needle = query.strip().lower()
        return any(
            needle in value.lower()
            for value in (self.admission_number, self.first_name, self.last_name)
            if value
        )

    def deactivate(self) -> None:
        self.is_active = False
