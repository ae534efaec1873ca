"""AssignStudentTransportUseCase: validate, assign, bill the first month."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from uuid import UUID

from app.application.ports.billing_repo import BillingRepository
from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.route_repo import RouteRepository
from app.application.ports.student_repo import StudentRepository
from app.application.ports.transport_assignment_repo import TransportAssignmentRepository
from app.application.ports.transport_fee_repo import TransportFeeRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.domain.entities.billing import FeeMaster, FeeType, StudentFeeAssignment
from app.domain.entities.transport_assignment import StudentTransportAssignment
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.policies.billing import (
    TRANSPORT_FEE_TYPE_CATEGORY,
    TRANSPORT_FEE_TYPE_DESCRIPTION,
    TRANSPORT_FEE_TYPE_NAME,
    BillingPeriod,
)
from app.domain.policies.timestamps import utc_now
from app.domain.value_objects.enums import AssignmentStatus, FeeStatus, Shift

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Student assigned to transport and fee generated successfully"


@dataclass
class AssignmentRequest:
    student_id: UUID
    route_id: UUID
    pickup_point_id: UUID
    valid_from: datetime | None = None
    valid_to: datetime | None = None
    shift: Shift | None = None
    created_by: str | None = None


@dataclass
class AssignmentResult:
    assignment: StudentTransportAssignment
    fee_assignment: StudentFeeAssignment | None
    message: str = SUCCESS_MESSAGE


class AssignStudentTransportUseCase:
    """Assign a student to a route stop and bill the current month.

    Preconditions are checked in a fixed order and fail fast; the writes
    (fee type, assignment, shared fee master, billing line) then happen in a
    single unit of work so a failure leaves no partial state behind.
    """

    def __init__(
        self,
        student_repo: StudentRepository,
        route_repo: RouteRepository,
        stop_repo: RoutePickupPointRepository,
        assignment_repo: TransportAssignmentRepository,
        fee_repo: TransportFeeRepository,
        billing_repo: BillingRepository,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._students = student_repo
        self._routes = route_repo
        self._stops = stop_repo
        self._assignments = assignment_repo
        self._fees = fee_repo
        self._billing = billing_repo
        self._uow = uow
        self._clock = clock

    async def execute(self, request: AssignmentRequest, academic_year: str) -> AssignmentResult:
        """Run the workflow for *academic_year* (used verbatim, not derived from dates)."""
        transport_fee = await self._check_preconditions(request, academic_year)
        now = self._clock()

        async with self._uow.atomic():
            fee_type = await self._ensure_transport_fee_type()

            assignment = await self._assignments.save(
                StudentTransportAssignment(
                    id=None,
                    student_id=request.student_id,
                    route_id=request.route_id,
                    pickup_point_id=request.pickup_point_id,
                    valid_from=request.valid_from or now,
                    valid_to=request.valid_to,
                    shift=request.shift,
                    monthly_fee=transport_fee.monthly_fee,
                    status=AssignmentStatus.ACTIVE,
                    created_by=request.created_by,
                )
            )

            fee_master = await self._ensure_fee_master(fee_type, transport_fee, academic_year)
            fee_assignment = await self._bill_current_month(
                request, fee_master, transport_fee, BillingPeriod.containing(now)
            )

        logger.info(
            "Student %s assigned to route %s at stop %s (fee %s, year %s)",
            request.student_id, request.route_id, request.pickup_point_id,
            transport_fee.monthly_fee, academic_year,
        )
        stored = await self._assignments.get_by_id(assignment.id)
        return AssignmentResult(assignment=stored or assignment, fee_assignment=fee_assignment)

    async def _check_preconditions(
        self, request: AssignmentRequest, academic_year: str
    ) -> TransportFeeMaster:
        student = await self._students.get_by_id(request.student_id)
        if student is None:
            raise NotFoundError("Student not found")
        if not student.is_active:
            raise InvalidStateError("Student is not active")

        route = await self._routes.get_by_id(request.route_id)
        if route is None:
            raise NotFoundError("Route not found")
        if not route.is_active:
            raise InvalidStateError("Route is not active")

        stop = await self._stops.find(request.route_id, request.pickup_point_id)
        if stop is None:
            logger.warning(
                "Pickup point %s is not on route %s", request.pickup_point_id, request.route_id
            )
            raise InvalidStateError("Selected pickup point is not part of this route")

        existing = await self._assignments.find_active_for_student(request.student_id)
        if existing is not None:
            logger.warning(
                "Student %s already has active assignment %s", request.student_id, existing.id
            )
            raise ConflictError(
                "Student already has an active transport assignment. "
                "Please deactivate it first."
            )

        transport_fee = await self._fees.find_active(request.route_id, academic_year)
        if transport_fee is None:
            logger.warning(
                "No active transport fee for route %s in %s", request.route_id, academic_year
            )
            raise NotFoundError(
                "No transport fee structure found for this route and academic year"
            )
        return transport_fee

    async def _ensure_transport_fee_type(self) -> FeeType:
        fee_type = await self._billing.get_fee_type_by_name(TRANSPORT_FEE_TYPE_NAME)
        if fee_type is None:
            fee_type = await self._billing.save_fee_type(
                FeeType(
                    id=None,
                    name=TRANSPORT_FEE_TYPE_NAME,
                    description=TRANSPORT_FEE_TYPE_DESCRIPTION,
                    category=TRANSPORT_FEE_TYPE_CATEGORY,
                )
            )
            logger.info("Created fee type '%s'", TRANSPORT_FEE_TYPE_NAME)
        return fee_type

    async def _ensure_fee_master(
        self, fee_type: FeeType, transport_fee: TransportFeeMaster, academic_year: str
    ) -> FeeMaster:
        # One shared bucket per (fee type, year): its amount comes from whichever
        # route created it first. Each bill still carries its own route's fee.
        fee_master = await self._billing.find_active_fee_master(fee_type.id, academic_year)
        if fee_master is None:
            fee_master = await self._billing.save_fee_master(
                FeeMaster(
                    id=None,
                    fee_type_id=fee_type.id,
                    amount=transport_fee.monthly_fee,
                    academic_year=academic_year,
                    is_active=True,
                )
            )
            logger.info("Created transport fee master for %s", academic_year)
        return fee_master

    async def _bill_current_month(
        self,
        request: AssignmentRequest,
        fee_master: FeeMaster,
        transport_fee: TransportFeeMaster,
        period: BillingPeriod,
    ) -> StudentFeeAssignment | None:
        existing = await self._billing.find_fee_assignment(
            request.student_id, fee_master.id, period.month, period.year
        )
        if existing is not None:
            logger.info(
                "Student %s already billed for %02d/%d, skipping",
                request.student_id, period.month, period.year,
            )
            return None

        return await self._billing.save_fee_assignment(
            StudentFeeAssignment(
                id=None,
                student_id=request.student_id,
                fee_master_id=fee_master.id,
                amount=transport_fee.monthly_fee,
                month=period.month,
                year=period.year,
                due_date=period.due_date,
                status=FeeStatus.PENDING,
                created_by=request.created_by,
            )
        )
