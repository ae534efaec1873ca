"""Student transport endpoints: the assignment workflow and its lifecycle."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.transport_assignment_repo import AssignmentFilter
from app.application.services.student_transport_service import StudentTransportService
from app.application.use_cases.assign_student_transport import (
    AssignmentRequest,
    AssignStudentTransportUseCase,
)
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import CurrentUser, read_access, write_access
from app.infrastructure.api.dependencies import (
    get_academic_year,
    get_assign_student_transport_uc,
    get_student_transport_service,
)
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import StudentTransportAssign, StudentTransportUpdate
from app.infrastructure.api.serializers import serialize_assignment, serialize_fee_assignment

router = APIRouter(prefix="/student-transport", tags=["student-transport"])


@router.post("/assign", status_code=201)
async def assign_student(
    body: StudentTransportAssign,
    user: CurrentUser = Depends(write_access),
    academic_year: str = Depends(get_academic_year),
    uc: AssignStudentTransportUseCase = Depends(get_assign_student_transport_uc),
):
    """Assign a student to a route stop and bill the current month."""
    fields = body.model_dump()
    fields["created_by"] = body.created_by or user.id
    result = await uc.execute(AssignmentRequest(**fields), academic_year)
    return ok(
        {
            "assignment": serialize_assignment(result.assignment),
            "feeAssignment": serialize_fee_assignment(result.fee_assignment),
            "message": result.message,
        },
        result.message,
    )


@router.get("", dependencies=[Depends(read_access)])
async def list_assignments(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    student_id: UUID | None = Query(None, alias="studentId"),
    route_id: UUID | None = Query(None, alias="routeId"),
    status: AssignmentStatus | None = Query(None),
    service: StudentTransportService = Depends(get_student_transport_service),
):
    result = await service.list(
        AssignmentFilter(student_id=student_id, route_id=route_id, status=status),
        PageRequest.of(page, limit),
    )
    return paginated(result, serialize_assignment, "Transport assignments retrieved successfully")


@router.get("/{assignment_id}", dependencies=[Depends(read_access)])
async def get_assignment(
    assignment_id: UUID,
    service: StudentTransportService = Depends(get_student_transport_service),
):
    assignment = await service.get(assignment_id)
    return ok(serialize_assignment(assignment), "Transport assignment retrieved successfully")


@router.put("/{assignment_id}", dependencies=[Depends(write_access)])
async def update_assignment(
    assignment_id: UUID,
    body: StudentTransportUpdate,
    service: StudentTransportService = Depends(get_student_transport_service),
):
    assignment = await service.update(assignment_id, body.changes())
    return ok(serialize_assignment(assignment), "Transport assignment updated successfully")


@router.put("/{assignment_id}/deactivate", dependencies=[Depends(write_access)])
async def deactivate_assignment(
    assignment_id: UUID,
    service: StudentTransportService = Depends(get_student_transport_service),
):
    assignment = await service.deactivate(assignment_id)
    return ok(serialize_assignment(assignment), "Transport assignment deactivated successfully")
