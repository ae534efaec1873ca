"""StudentTransportAssignment: binds a student to a route and a stop."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route
from app.domain.entities.student import Student
from app.domain.value_objects.enums import AssignmentStatus, Shift


@dataclass
class StudentTransportAssignment:
    id: UUID | None
    student_id: UUID
    route_id: UUID
    pickup_point_id: UUID
    valid_from: datetime
    monthly_fee: Decimal
    valid_to: datetime | None = None
    shift: Shift | None = None
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    created_by: str | None = None
    created_at: datetime | None = None
    student: Student | None = None
    route: Route | None = None
    pickup_point: PickupPoint | None = None

    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE

    def deactivate(self, at: datetime) -> None:
        # No guard: deactivating twice just moves valid_to forward.
        self.status = AssignmentStatus.INACTIVE
        self.valid_to = at
