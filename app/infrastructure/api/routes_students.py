"""Student endpoints: CRUD plus the typeahead search."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.application.ports.student_repo import StudentFilter
from app.application.services.student_service import StudentService
from app.domain.entities.student import Student
from app.domain.value_objects.pagination import PageRequest
from app.infrastructure.api.auth import read_access, write_access
from app.infrastructure.api.dependencies import get_student_service
from app.infrastructure.api.responses import ok, paginated
from app.infrastructure.api.schemas import StudentCreate, StudentUpdate
from app.infrastructure.api.serializers import serialize_student

router = APIRouter(prefix="/students", tags=["students"])


@router.post("", status_code=201, dependencies=[Depends(write_access)])
async def create_student(
    body: StudentCreate, service: StudentService = Depends(get_student_service)
):
    student = await service.create(Student(id=None, **body.model_dump()))
    return ok(serialize_student(student), "Student created successfully")


@router.get("", dependencies=[Depends(read_access)])
async def list_students(
    page: int | None = Query(None),
    limit: int | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    search: str | None = Query(None),
    service: StudentService = Depends(get_student_service),
):
    result = await service.list(
        StudentFilter(is_active=is_active, search=search), PageRequest.of(page, limit)
    )
    return paginated(result, serialize_student, "Students retrieved successfully")


# Declared before /{student_id} so "search" is not parsed as an id
@router.get("/search", dependencies=[Depends(read_access)])
async def search_students(
    q: str | None = Query(None), service: StudentService = Depends(get_student_service)
):
    students = await service.search(q)
    return ok([serialize_student(s) for s in students], "Students retrieved successfully")


@router.get("/{student_id}", dependencies=[Depends(read_access)])
async def get_student(student_id: UUID, service: StudentService = Depends(get_student_service)):
    student = await service.get(student_id)
    return ok(serialize_student(student), "Student retrieved successfully")


@router.put("/{student_id}", dependencies=[Depends(write_access)])
async def update_student(
    student_id: UUID,
    body: StudentUpdate,
    service: StudentService = Depends(get_student_service),
):
    student = await service.update(student_id, body.changes())
    return ok(serialize_student(student), "Student updated successfully")


@router.delete("/{student_id}", dependencies=[Depends(write_access)])
async def delete_student(student_id: UUID, service: StudentService = Depends(get_student_service)):
    student = await service.deactivate(student_id)
    return ok(serialize_student(student), "Student deactivated successfully")
