"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.adapters.persistence.models import (
    FeeMasterModel,
    FeeTypeModel,
    PickupPointModel,
    RouteModel,
    RoutePickupPointModel,
    RouteVehicleAssignmentModel,
    StudentFeeAssignmentModel,
    StudentModel,
    StudentTransportAssignmentModel,
    TransportFeeMasterModel,
    VehicleModel,
)
from app.application.ports.billing_repo import BillingRepository
from app.application.ports.pickup_point_repo import PickupPointFilter, PickupPointRepository
from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.route_repo import RouteFilter, RouteRepository
from app.application.ports.route_vehicle_repo import RouteVehicleFilter, RouteVehicleRepository
from app.application.ports.student_repo import StudentFilter, StudentRepository
from app.application.ports.transport_assignment_repo import (
    AssignmentFilter,
    TransportAssignmentRepository,
)
from app.application.ports.transport_fee_repo import TransportFeeFilter, TransportFeeRepository
from app.application.ports.vehicle_repo import VehicleFilter, VehicleRepository
from app.domain.entities.billing import FeeMaster, FeeType, StudentFeeAssignment
from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.entities.student import Student
from app.domain.entities.transport_assignment import StudentTransportAssignment
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import NotFoundError
from app.domain.value_objects.enums import AssignmentStatus, FeeStatus, Shift
from app.domain.value_objects.geo_point import GeoPoint
from app.domain.value_objects.pagination import Page, PageRequest

# ─── Mappers ─────────────────────────────────────────────────────────


def _student_to_domain(m: StudentModel) -> Student:
    return Student(
        id=m.id,
        admission_number=m.admission_number,
        first_name=m.first_name,
        last_name=m.last_name,
        class_name=m.class_name,
        section=m.section,
        roll_number=m.roll_number,
        email=m.email,
        phone=m.phone,
        parent_name=m.parent_name,
        parent_phone=m.parent_phone,
        address=m.address,
        is_active=m.is_active,
        created_at=m.created_at,
    )


def _student_values(s: Student) -> dict[str, Any]:
    return {
        "admission_number": s.admission_number,
        "first_name": s.first_name,
        "last_name": s.last_name,
        "class_name": s.class_name,
        "section": s.section,
        "roll_number": s.roll_number,
        "email": s.email,
        "phone": s.phone,
        "parent_name": s.parent_name,
        "parent_phone": s.parent_phone,
        "address": s.address,
        "is_active": s.is_active,
    }


def _route_to_domain(m: RouteModel) -> Route:
    return Route(
        id=m.id,
        route_name=m.route_name,
        route_code=m.route_code,
        start_point=m.start_point,
        end_point=m.end_point,
        distance=m.distance,
        estimated_duration=m.estimated_duration,
        is_active=m.is_active,
        created_at=m.created_at,
    )


def _route_values(r: Route) -> dict[str, Any]:
    return {
        "route_name": r.route_name,
        "route_code": r.route_code,
        "start_point": r.start_point,
        "end_point": r.end_point,
        "distance": r.distance,
        "estimated_duration": r.estimated_duration,
        "is_active": r.is_active,
    }


def _pickup_point_to_domain(m: PickupPointModel) -> PickupPoint:
    return PickupPoint(
        id=m.id,
        name=m.name,
        address=m.address,
        location=GeoPoint.from_optional(m.latitude, m.longitude),
        landmark=m.landmark,
        is_active=m.is_active,
        created_at=m.created_at,
    )


def _pickup_point_values(p: PickupPoint) -> dict[str, Any]:
    return {
        "name": p.name,
        "address": p.address,
        "latitude": p.location.latitude if p.location else None,
        "longitude": p.location.longitude if p.location else None,
        "landmark": p.landmark,
        "is_active": p.is_active,
    }


def _stop_to_domain(m: RoutePickupPointModel, with_relations: bool = False) -> RoutePickupPoint:
    return RoutePickupPoint(
        id=m.id,
        route_id=m.route_id,
        pickup_point_id=m.pickup_point_id,
        sequence_order=m.sequence_order,
        estimated_time=m.estimated_time,
        distance_from_start=m.distance_from_start,
        route=_route_to_domain(m.route) if with_relations else None,
        pickup_point=_pickup_point_to_domain(m.pickup_point) if with_relations else None,
    )


def _stop_values(s: RoutePickupPoint) -> dict[str, Any]:
    return {
        "route_id": s.route_id,
        "pickup_point_id": s.pickup_point_id,
        "sequence_order": s.sequence_order,
        "estimated_time": s.estimated_time,
        "distance_from_start": s.distance_from_start,
    }


def _vehicle_to_domain(m: VehicleModel) -> Vehicle:
    return Vehicle(
        id=m.id,
        vehicle_number=m.vehicle_number,
        vehicle_type=m.vehicle_type,
        capacity=m.capacity,
        driver_name=m.driver_name,
        driver_phone=m.driver_phone,
        driver_license=m.driver_license,
        helper_name=m.helper_name,
        helper_phone=m.helper_phone,
        registration_number=m.registration_number,
        insurance_expiry=m.insurance_expiry,
        fitness_expiry=m.fitness_expiry,
        is_active=m.is_active,
        created_at=m.created_at,
    )


def _vehicle_values(v: Vehicle) -> dict[str, Any]:
    return {
        "vehicle_number": v.vehicle_number,
        "vehicle_type": v.vehicle_type,
        "capacity": v.capacity,
        "driver_name": v.driver_name,
        "driver_phone": v.driver_phone,
        "driver_license": v.driver_license,
        "helper_name": v.helper_name,
        "helper_phone": v.helper_phone,
        "registration_number": v.registration_number,
        "insurance_expiry": v.insurance_expiry,
        "fitness_expiry": v.fitness_expiry,
        "is_active": v.is_active,
    }


def _route_vehicle_to_domain(
    m: RouteVehicleAssignmentModel, with_relations: bool = False
) -> RouteVehicleAssignment:
    return RouteVehicleAssignment(
        id=m.id,
        route_id=m.route_id,
        vehicle_id=m.vehicle_id,
        valid_from=m.valid_from,
        valid_to=m.valid_to,
        shift=Shift(m.shift) if m.shift else None,
        is_active=m.is_active,
        created_at=m.created_at,
        route=_route_to_domain(m.route) if with_relations else None,
        vehicle=_vehicle_to_domain(m.vehicle) if with_relations else None,
    )


def _route_vehicle_values(a: RouteVehicleAssignment) -> dict[str, Any]:
    return {
        "route_id": a.route_id,
        "vehicle_id": a.vehicle_id,
        "valid_from": a.valid_from,
        "valid_to": a.valid_to,
        "shift": a.shift.value if a.shift else None,
        "is_active": a.is_active,
    }


def _fee_to_domain(m: TransportFeeMasterModel, with_route: bool = False) -> TransportFeeMaster:
    return TransportFeeMaster(
        id=m.id,
        route_id=m.route_id,
        zone_name=m.zone_name,
        monthly_fee=m.monthly_fee,
        description=m.description,
        academic_year=m.academic_year,
        is_active=m.is_active,
        created_at=m.created_at,
        route=_route_to_domain(m.route) if with_route and m.route else None,
    )


def _fee_values(f: TransportFeeMaster) -> dict[str, Any]:
    return {
        "route_id": f.route_id,
        "zone_name": f.zone_name,
        "monthly_fee": f.monthly_fee,
        "description": f.description,
        "academic_year": f.academic_year,
        "is_active": f.is_active,
    }


def _assignment_to_domain(
    m: StudentTransportAssignmentModel, with_relations: bool = False
) -> StudentTransportAssignment:
    return StudentTransportAssignment(
        id=m.id,
        student_id=m.student_id,
        route_id=m.route_id,
        pickup_point_id=m.pickup_point_id,
        valid_from=m.valid_from,
        valid_to=m.valid_to,
        shift=Shift(m.shift) if m.shift else None,
        monthly_fee=m.monthly_fee,
        status=AssignmentStatus(m.status),
        created_by=m.created_by,
        created_at=m.created_at,
        student=_student_to_domain(m.student) if with_relations else None,
        route=_route_to_domain(m.route) if with_relations else None,
        pickup_point=_pickup_point_to_domain(m.pickup_point) if with_relations else None,
    )


def _assignment_values(a: StudentTransportAssignment) -> dict[str, Any]:
    return {
        "student_id": a.student_id,
        "route_id": a.route_id,
        "pickup_point_id": a.pickup_point_id,
        "valid_from": a.valid_from,
        "valid_to": a.valid_to,
        "shift": a.shift.value if a.shift else None,
        "monthly_fee": a.monthly_fee,
        "status": a.status.value,
        "created_by": a.created_by,
    }


def _fee_assignment_to_domain(m: StudentFeeAssignmentModel) -> StudentFeeAssignment:
    return StudentFeeAssignment(
        id=m.id,
        student_id=m.student_id,
        fee_master_id=m.fee_master_id,
        amount=m.amount,
        month=m.month,
        year=m.year,
        due_date=m.due_date,
        status=FeeStatus(m.status),
        created_by=m.created_by,
        created_at=m.created_at,
    )


# ─── Helpers ─────────────────────────────────────────────────────────


def _contains(term: str, *columns) -> ColumnElement[bool]:
    """Case-insensitive substring match on any of *columns*.

    LIKE wildcards in *term* match literally.
    """
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(*(col.ilike(pattern, escape="\\") for col in columns))


def _assign(model: Any, values: dict[str, Any]) -> None:
    for name, value in values.items():
        setattr(model, name, value)


async def _fetch_page(
    session: AsyncSession,
    model: type,
    conditions: Sequence[ColumnElement[bool]],
    page: PageRequest,
    options: Sequence[Any] = (),
) -> tuple[Sequence[Any], int]:
    """Newest-first page of *model* rows plus the unpaged total."""
    total = (
        await session.execute(select(func.count()).select_from(model).where(*conditions))
    ).scalar_one()
    result = await session.execute(
        select(model)
        .options(*options)
        .where(*conditions)
        .order_by(model.created_at.desc())
        .offset(page.offset)
        .limit(page.limit)
    )
    return result.scalars().all(), total


async def _get_or_fail(session: AsyncSession, model: type, pk: UUID | None, label: str) -> Any:
    m = await session.get(model, pk) if pk is not None else None
    if m is None:
        raise NotFoundError(f"{label} not found")
    return m


# ─── Repositories ────────────────────────────────────────────────────


class SqlStudentRepository(StudentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, student: Student) -> Student:
        m = StudentModel(**_student_values(student))
        self._s.add(m)
        await self._s.flush()
        student.id = m.id
        student.created_at = m.created_at
        return student

    async def get_by_id(self, student_id: UUID) -> Student | None:
        m = await self._s.get(StudentModel, student_id)
        return _student_to_domain(m) if m else None

    async def get_by_admission_number(self, admission_number: str) -> Student | None:
        result = await self._s.execute(
            select(StudentModel).where(StudentModel.admission_number == admission_number)
        )
        m = result.scalar_one_or_none()
        return _student_to_domain(m) if m else None

    async def list(self, filters: StudentFilter, page: PageRequest) -> Page[Student]:
        conditions = []
        if filters.is_active is not None:
            conditions.append(StudentModel.is_active.is_(filters.is_active))
        if filters.search:
            conditions.append(
                _contains(
                    filters.search,
                    StudentModel.admission_number,
                    StudentModel.first_name,
                    StudentModel.last_name,
                    StudentModel.email,
                )
            )
        rows, total = await _fetch_page(self._s, StudentModel, conditions, page)
        return Page(items=[_student_to_domain(m) for m in rows], total=total, request=page)

    async def search_active(self, query: str, limit: int) -> list[Student]:
        result = await self._s.execute(
            select(StudentModel)
            .where(
                StudentModel.is_active.is_(True),
                _contains(
                    query,
                    StudentModel.admission_number,
                    StudentModel.first_name,
                    StudentModel.last_name,
                ),
            )
            .order_by(StudentModel.admission_number)
            .limit(limit)
        )
        return [_student_to_domain(m) for m in result.scalars()]

    async def update(self, student: Student) -> Student:
        m = await _get_or_fail(self._s, StudentModel, student.id, "Student")
        _assign(m, _student_values(student))
        await self._s.flush()
        return _student_to_domain(m)


class SqlRouteRepository(RouteRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, route: Route) -> Route:
        m = RouteModel(**_route_values(route))
        self._s.add(m)
        await self._s.flush()
        route.id = m.id
        route.created_at = m.created_at
        return route

    async def get_by_id(self, route_id: UUID) -> Route | None:
        m = await self._s.get(RouteModel, route_id)
        return _route_to_domain(m) if m else None

    async def get_by_name(self, route_name: str) -> Route | None:
        result = await self._s.execute(select(RouteModel).where(RouteModel.route_name == route_name))
        m = result.scalar_one_or_none()
        return _route_to_domain(m) if m else None

    async def get_by_code(self, route_code: str) -> Route | None:
        result = await self._s.execute(select(RouteModel).where(RouteModel.route_code == route_code))
        m = result.scalar_one_or_none()
        return _route_to_domain(m) if m else None

    async def list(self, filters: RouteFilter, page: PageRequest) -> Page[Route]:
        conditions = []
        if filters.is_active is not None:
            conditions.append(RouteModel.is_active.is_(filters.is_active))
        if filters.search:
            conditions.append(
                _contains(
                    filters.search,
                    RouteModel.route_name,
                    RouteModel.route_code,
                    RouteModel.start_point,
                    RouteModel.end_point,
                )
            )

        total = (
            await self._s.execute(select(func.count()).select_from(RouteModel).where(*conditions))
        ).scalar_one()

        def _count(model) -> Any:
            return (
                select(func.count(model.id))
                .where(model.route_id == RouteModel.id)
                .correlate(RouteModel)
                .scalar_subquery()
            )

        result = await self._s.execute(
            select(
                RouteModel,
                _count(RoutePickupPointModel),
                _count(RouteVehicleAssignmentModel),
                _count(StudentTransportAssignmentModel),
            )
            .where(*conditions)
            .order_by(RouteModel.created_at.desc())
            .offset(page.offset)
            .limit(page.limit)
        )
        routes = []
        for m, stops, vehicles, students in result.all():
            route = _route_to_domain(m)
            route.counts = {
                "pickupPoints": stops,
                "vehicleAssignments": vehicles,
                "studentAssignments": students,
            }
            routes.append(route)
        return Page(items=routes, total=total, request=page)

    async def update(self, route: Route) -> Route:
        m = await _get_or_fail(self._s, RouteModel, route.id, "Route")
        _assign(m, _route_values(route))
        await self._s.flush()
        return _route_to_domain(m)


class SqlPickupPointRepository(PickupPointRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, pickup_point: PickupPoint) -> PickupPoint:
        m = PickupPointModel(**_pickup_point_values(pickup_point))
        self._s.add(m)
        await self._s.flush()
        pickup_point.id = m.id
        pickup_point.created_at = m.created_at
        return pickup_point

    async def get_by_id(self, pickup_point_id: UUID) -> PickupPoint | None:
        m = await self._s.get(PickupPointModel, pickup_point_id)
        return _pickup_point_to_domain(m) if m else None

    async def list(self, filters: PickupPointFilter, page: PageRequest) -> Page[PickupPoint]:
        conditions = []
        if filters.is_active is not None:
            conditions.append(PickupPointModel.is_active.is_(filters.is_active))
        if filters.search:
            conditions.append(
                _contains(filters.search, PickupPointModel.name, PickupPointModel.address)
            )
        rows, total = await _fetch_page(self._s, PickupPointModel, conditions, page)
        return Page(items=[_pickup_point_to_domain(m) for m in rows], total=total, request=page)

    async def update(self, pickup_point: PickupPoint) -> PickupPoint:
        m = await _get_or_fail(self._s, PickupPointModel, pickup_point.id, "Pickup point")
        _assign(m, _pickup_point_values(pickup_point))
        await self._s.flush()
        return _pickup_point_to_domain(m)


class SqlRoutePickupPointRepository(RoutePickupPointRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, stop: RoutePickupPoint) -> RoutePickupPoint:
        m = RoutePickupPointModel(**_stop_values(stop))
        self._s.add(m)
        await self._s.flush()
        stop.id = m.id
        return stop

    async def get_by_id(self, stop_id: UUID) -> RoutePickupPoint | None:
        m = await self._s.get(RoutePickupPointModel, stop_id)
        return _stop_to_domain(m) if m else None

    async def find(self, route_id: UUID, pickup_point_id: UUID) -> RoutePickupPoint | None:
        result = await self._s.execute(
            select(RoutePickupPointModel).where(
                RoutePickupPointModel.route_id == route_id,
                RoutePickupPointModel.pickup_point_id == pickup_point_id,
            )
        )
        m = result.scalar_one_or_none()
        return _stop_to_domain(m) if m else None

    async def list_for_route(self, route_id: UUID) -> list[RoutePickupPoint]:
        result = await self._s.execute(
            select(RoutePickupPointModel)
            .options(
                selectinload(RoutePickupPointModel.route),
                selectinload(RoutePickupPointModel.pickup_point),
            )
            .where(RoutePickupPointModel.route_id == route_id)
            .order_by(RoutePickupPointModel.sequence_order.asc(), RoutePickupPointModel.created_at)
        )
        return [_stop_to_domain(m, with_relations=True) for m in result.scalars()]

    async def count_for_pickup_point(self, pickup_point_id: UUID) -> int:
        result = await self._s.execute(
            select(func.count(RoutePickupPointModel.id)).where(
                RoutePickupPointModel.pickup_point_id == pickup_point_id
            )
        )
        return result.scalar_one()

    async def update(self, stop: RoutePickupPoint) -> RoutePickupPoint:
        m = await _get_or_fail(self._s, RoutePickupPointModel, stop.id, "Route pickup point")
        _assign(m, _stop_values(stop))
        await self._s.flush()
        await self._s.refresh(m, ["route", "pickup_point"])
        return _stop_to_domain(m, with_relations=True)

    async def delete(self, stop_id: UUID) -> None:
        await self._s.execute(delete(RoutePickupPointModel).where(RoutePickupPointModel.id == stop_id))
        await self._s.flush()


class SqlVehicleRepository(VehicleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, vehicle: Vehicle) -> Vehicle:
        m = VehicleModel(**_vehicle_values(vehicle))
        self._s.add(m)
        await self._s.flush()
        vehicle.id = m.id
        vehicle.created_at = m.created_at
        return vehicle

    async def get_by_id(self, vehicle_id: UUID) -> Vehicle | None:
        m = await self._s.get(VehicleModel, vehicle_id)
        return _vehicle_to_domain(m) if m else None

    async def get_by_number(self, vehicle_number: str) -> Vehicle | None:
        result = await self._s.execute(
            select(VehicleModel).where(VehicleModel.vehicle_number == vehicle_number)
        )
        m = result.scalar_one_or_none()
        return _vehicle_to_domain(m) if m else None

    async def list(self, filters: VehicleFilter, page: PageRequest) -> Page[Vehicle]:
        conditions = []
        if filters.is_active is not None:
            conditions.append(VehicleModel.is_active.is_(filters.is_active))
        if filters.search:
            conditions.append(
                _contains(filters.search, VehicleModel.vehicle_number, VehicleModel.driver_name)
            )
        rows, total = await _fetch_page(self._s, VehicleModel, conditions, page)
        return Page(items=[_vehicle_to_domain(m) for m in rows], total=total, request=page)

    async def update(self, vehicle: Vehicle) -> Vehicle:
        m = await _get_or_fail(self._s, VehicleModel, vehicle.id, "Vehicle")
        _assign(m, _vehicle_values(vehicle))
        await self._s.flush()
        return _vehicle_to_domain(m)


class SqlRouteVehicleRepository(RouteVehicleRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    _relations = (
        selectinload(RouteVehicleAssignmentModel.route),
        selectinload(RouteVehicleAssignmentModel.vehicle),
    )

    async def save(self, assignment: RouteVehicleAssignment) -> RouteVehicleAssignment:
        m = RouteVehicleAssignmentModel(**_route_vehicle_values(assignment))
        self._s.add(m)
        await self._s.flush()
        assignment.id = m.id
        assignment.created_at = m.created_at
        return assignment

    async def get_by_id(self, assignment_id: UUID) -> RouteVehicleAssignment | None:
        m = await self._s.get(RouteVehicleAssignmentModel, assignment_id)
        return _route_vehicle_to_domain(m) if m else None

    async def find_active(
        self, route_id: UUID, vehicle_id: UUID, shift: Shift | None
    ) -> RouteVehicleAssignment | None:
        shift_cond = (
            RouteVehicleAssignmentModel.shift.is_(None)
            if shift is None
            else RouteVehicleAssignmentModel.shift == shift.value
        )
        result = await self._s.execute(
            select(RouteVehicleAssignmentModel).where(
                RouteVehicleAssignmentModel.route_id == route_id,
                RouteVehicleAssignmentModel.vehicle_id == vehicle_id,
                RouteVehicleAssignmentModel.is_active.is_(True),
                shift_cond,
            )
        )
        m = result.scalars().first()
        return _route_vehicle_to_domain(m) if m else None

    async def list(
        self, filters: RouteVehicleFilter, page: PageRequest
    ) -> Page[RouteVehicleAssignment]:
        conditions = []
        if filters.route_id is not None:
            conditions.append(RouteVehicleAssignmentModel.route_id == filters.route_id)
        if filters.vehicle_id is not None:
            conditions.append(RouteVehicleAssignmentModel.vehicle_id == filters.vehicle_id)
        if filters.is_active is not None:
            conditions.append(RouteVehicleAssignmentModel.is_active.is_(filters.is_active))
        rows, total = await _fetch_page(
            self._s, RouteVehicleAssignmentModel, conditions, page, self._relations
        )
        return Page(
            items=[_route_vehicle_to_domain(m, with_relations=True) for m in rows],
            total=total,
            request=page,
        )

    async def list_active_for_route(self, route_id: UUID) -> list[RouteVehicleAssignment]:
        result = await self._s.execute(
            select(RouteVehicleAssignmentModel)
            .options(*self._relations)
            .where(
                RouteVehicleAssignmentModel.route_id == route_id,
                RouteVehicleAssignmentModel.is_active.is_(True),
            )
            .order_by(RouteVehicleAssignmentModel.created_at)
        )
        return [_route_vehicle_to_domain(m, with_relations=True) for m in result.scalars()]

    async def count_active_for_vehicle(self, vehicle_id: UUID) -> int:
        result = await self._s.execute(
            select(func.count(RouteVehicleAssignmentModel.id)).where(
                RouteVehicleAssignmentModel.vehicle_id == vehicle_id,
                RouteVehicleAssignmentModel.is_active.is_(True),
            )
        )
        return result.scalar_one()

    async def update(self, assignment: RouteVehicleAssignment) -> RouteVehicleAssignment:
        m = await _get_or_fail(self._s, RouteVehicleAssignmentModel, assignment.id, "Assignment")
        _assign(m, _route_vehicle_values(assignment))
        await self._s.flush()
        return _route_vehicle_to_domain(m)


class SqlTransportFeeRepository(TransportFeeRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, fee: TransportFeeMaster) -> TransportFeeMaster:
        m = TransportFeeMasterModel(**_fee_values(fee))
        self._s.add(m)
        await self._s.flush()
        fee.id = m.id
        fee.created_at = m.created_at
        return fee

    async def get_by_id(self, fee_id: UUID) -> TransportFeeMaster | None:
        result = await self._s.execute(
            select(TransportFeeMasterModel)
            .options(selectinload(TransportFeeMasterModel.route))
            .where(TransportFeeMasterModel.id == fee_id)
        )
        m = result.scalar_one_or_none()
        return _fee_to_domain(m, with_route=True) if m else None

    async def find_active(self, route_id: UUID, academic_year: str) -> TransportFeeMaster | None:
        result = await self._s.execute(
            select(TransportFeeMasterModel)
            .where(
                TransportFeeMasterModel.route_id == route_id,
                TransportFeeMasterModel.academic_year == academic_year,
                TransportFeeMasterModel.is_active.is_(True),
            )
            .order_by(TransportFeeMasterModel.created_at)
        )
        m = result.scalars().first()
        return _fee_to_domain(m) if m else None

    async def list(self, filters: TransportFeeFilter, page: PageRequest) -> Page[TransportFeeMaster]:
        conditions = []
        if filters.route_id is not None:
            conditions.append(TransportFeeMasterModel.route_id == filters.route_id)
        if filters.academic_year:
            conditions.append(TransportFeeMasterModel.academic_year == filters.academic_year)
        if filters.is_active is not None:
            conditions.append(TransportFeeMasterModel.is_active.is_(filters.is_active))
        rows, total = await _fetch_page(
            self._s,
            TransportFeeMasterModel,
            conditions,
            page,
            (selectinload(TransportFeeMasterModel.route),),
        )
        return Page(
            items=[_fee_to_domain(m, with_route=True) for m in rows], total=total, request=page
        )

    async def list_active_for_route(self, route_id: UUID) -> list[TransportFeeMaster]:
        result = await self._s.execute(
            select(TransportFeeMasterModel)
            .where(
                TransportFeeMasterModel.route_id == route_id,
                TransportFeeMasterModel.is_active.is_(True),
            )
            .order_by(TransportFeeMasterModel.academic_year.desc())
        )
        return [_fee_to_domain(m) for m in result.scalars()]

    async def update(self, fee: TransportFeeMaster) -> TransportFeeMaster:
        m = await _get_or_fail(self._s, TransportFeeMasterModel, fee.id, "Fee master")
        _assign(m, _fee_values(fee))
        await self._s.flush()
        await self._s.refresh(m, ["route"])
        return _fee_to_domain(m, with_route=True)


class SqlTransportAssignmentRepository(TransportAssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    _relations = (
        selectinload(StudentTransportAssignmentModel.student),
        selectinload(StudentTransportAssignmentModel.route),
        selectinload(StudentTransportAssignmentModel.pickup_point),
    )

    async def save(self, assignment: StudentTransportAssignment) -> StudentTransportAssignment:
        m = StudentTransportAssignmentModel(**_assignment_values(assignment))
        self._s.add(m)
        await self._s.flush()
        assignment.id = m.id
        assignment.created_at = m.created_at
        return assignment

    async def get_by_id(self, assignment_id: UUID) -> StudentTransportAssignment | None:
        result = await self._s.execute(
            select(StudentTransportAssignmentModel)
            .options(*self._relations)
            .where(StudentTransportAssignmentModel.id == assignment_id)
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _assignment_to_domain(m, with_relations=True) if m else None

    async def find_active_for_student(self, student_id: UUID) -> StudentTransportAssignment | None:
        result = await self._s.execute(
            select(StudentTransportAssignmentModel).where(
                StudentTransportAssignmentModel.student_id == student_id,
                StudentTransportAssignmentModel.status == AssignmentStatus.ACTIVE.value,
            )
        )
        m = result.scalars().first()
        return _assignment_to_domain(m) if m else None

    async def list(
        self, filters: AssignmentFilter, page: PageRequest
    ) -> Page[StudentTransportAssignment]:
        rows, total = await _fetch_page(
            self._s,
            StudentTransportAssignmentModel,
            self._conditions(filters),
            page,
            self._relations,
        )
        return Page(
            items=[_assignment_to_domain(m, with_relations=True) for m in rows],
            total=total,
            request=page,
        )

    async def count(self, filters: AssignmentFilter) -> int:
        result = await self._s.execute(
            select(func.count(StudentTransportAssignmentModel.id)).where(
                *self._conditions(filters)
            )
        )
        return result.scalar_one()

    async def update(self, assignment: StudentTransportAssignment) -> StudentTransportAssignment:
        m = await _get_or_fail(
            self._s, StudentTransportAssignmentModel, assignment.id, "Transport assignment"
        )
        _assign(m, _assignment_values(assignment))
        await self._s.flush()
        return _assignment_to_domain(m)

    @staticmethod
    def _conditions(filters: AssignmentFilter) -> list[ColumnElement[bool]]:
        conditions = []
        if filters.student_id is not None:
            conditions.append(StudentTransportAssignmentModel.student_id == filters.student_id)
        if filters.route_id is not None:
            conditions.append(StudentTransportAssignmentModel.route_id == filters.route_id)
        if filters.pickup_point_id is not None:
            conditions.append(
                StudentTransportAssignmentModel.pickup_point_id == filters.pickup_point_id
            )
        if filters.status is not None:
            conditions.append(StudentTransportAssignmentModel.status == filters.status.value)
        return conditions


class SqlBillingRepository(BillingRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def get_fee_type_by_name(self, name: str) -> FeeType | None:
        result = await self._s.execute(select(FeeTypeModel).where(FeeTypeModel.name == name))
        m = result.scalar_one_or_none()
        if m is None:
            return None
        return FeeType(id=m.id, name=m.name, description=m.description, category=m.category)

    async def save_fee_type(self, fee_type: FeeType) -> FeeType:
        m = FeeTypeModel(
            name=fee_type.name, description=fee_type.description, category=fee_type.category
        )
        self._s.add(m)
        await self._s.flush()
        fee_type.id = m.id
        return fee_type

    async def find_active_fee_master(self, fee_type_id: UUID, academic_year: str) -> FeeMaster | None:
        result = await self._s.execute(
            select(FeeMasterModel)
            .where(
                FeeMasterModel.fee_type_id == fee_type_id,
                FeeMasterModel.academic_year == academic_year,
                FeeMasterModel.is_active.is_(True),
            )
            .order_by(FeeMasterModel.created_at)
        )
        m = result.scalars().first()
        if m is None:
            return None
        return FeeMaster(
            id=m.id,
            fee_type_id=m.fee_type_id,
            amount=m.amount,
            academic_year=m.academic_year,
            is_active=m.is_active,
        )

    async def save_fee_master(self, fee_master: FeeMaster) -> FeeMaster:
        m = FeeMasterModel(
            fee_type_id=fee_master.fee_type_id,
            amount=fee_master.amount,
            academic_year=fee_master.academic_year,
            is_active=fee_master.is_active,
        )
        self._s.add(m)
        await self._s.flush()
        fee_master.id = m.id
        return fee_master

    async def find_fee_assignment(
        self, student_id: UUID, fee_master_id: UUID, month: int, year: int
    ) -> StudentFeeAssignment | None:
        result = await self._s.execute(
            select(StudentFeeAssignmentModel).where(
                StudentFeeAssignmentModel.student_id == student_id,
                StudentFeeAssignmentModel.fee_master_id == fee_master_id,
                StudentFeeAssignmentModel.month == month,
                StudentFeeAssignmentModel.year == year,
            )
        )
        m = result.scalar_one_or_none()
        return _fee_assignment_to_domain(m) if m else None

    async def save_fee_assignment(self, fee: StudentFeeAssignment) -> StudentFeeAssignment:
        m = StudentFeeAssignmentModel(
            student_id=fee.student_id,
            fee_master_id=fee.fee_master_id,
            amount=fee.amount,
            month=fee.month,
            year=fee.year,
            due_date=fee.due_date,
            status=fee.status.value,
            created_by=fee.created_by,
        )
        self._s.add(m)
        await self._s.flush()
        fee.id = m.id
        fee.created_at = m.created_at
        return fee
