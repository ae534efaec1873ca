"""Vehicle entity: a fleet unit with its driver and helper contacts."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Vehicle:
    id: UUID | None
    vehicle_number: str
    driver_name: str
    driver_phone: str
    vehicle_type: str | None = None
    capacity: int | None = None
    driver_license: str | None = None
    helper_name: str | None = None
    helper_phone: str | None = None
    registration_number: str | None = None
    insurance_expiry: datetime | None = None
    fitness_expiry: datetime | None = None
    is_active: bool = True
    created_at: datetime | None = None

    def deactivate(self) -> None:
        self.is_active = False
