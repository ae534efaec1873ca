"""Port interface for the billing side (fee types, fee masters, bills)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from app.domain.entities.billing import FeeMaster, FeeType, StudentFeeAssignment


class BillingRepository(ABC):
    @abstractmethod
    async def get_fee_type_by_name(self, name: str) -> FeeType | None:
        ...

    @abstractmethod
    async def save_fee_type(self, fee_type: FeeType) -> FeeType:
        ...

    @abstractmethod
    async def find_active_fee_master(self, fee_type_id: UUID, academic_year: str) -> FeeMaster | None:
        ...

    @abstractmethod
    async def save_fee_master(self, fee_master: FeeMaster) -> FeeMaster:
        ...

    @abstractmethod
    async def find_fee_assignment(
        self, student_id: UUID, fee_master_id: UUID, month: int, year: int
    ) -> StudentFeeAssignment | None:
        ...

    @abstractmethod
    async def save_fee_assignment(self, fee: StudentFeeAssignment) -> StudentFeeAssignment:
        ...
