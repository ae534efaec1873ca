"""Domain enums: pure Python, no external dependencies."""

from enum import Enum


class AssignmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class FeeStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    PARTIAL = "PARTIAL"
    OVERDUE = "OVERDUE"
    WAIVED = "WAIVED"


class Shift(str, Enum):
    MORNING = "MORNING"
    EVENING = "EVENING"
    BOTH = "BOTH"


class Role(str, Enum):
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    TRANSPORT_MANAGER = "TRANSPORT_MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
