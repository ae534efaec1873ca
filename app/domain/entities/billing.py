"""Billing entities shared with the general fee module."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from app.domain.value_objects.enums import FeeStatus


@dataclass
class FeeType:
    id: UUID | None
    name: str
    description: str | None = None
    category: str | None = None


@dataclass
class FeeMaster:
    """Generic rate definition for a fee type and academic year."""

    id: UUID | None
    fee_type_id: UUID
    amount: Decimal
    academic_year: str
    is_active: bool = True


@dataclass
class StudentFeeAssignment:
    """One billing line: a student, a fee master, a calendar month."""

    id: UUID | None
    student_id: UUID
    fee_master_id: UUID
    amount: Decimal
    month: int
    year: int
    due_date: datetime
    status: FeeStatus = FeeStatus.PENDING
    created_by: str | None = None
    created_at: datetime | None = None
