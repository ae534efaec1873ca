"""In-memory fakes for every repository port plus a rollback-aware unit of work."""

from __future__ import annotations

import copy
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.application.ports.billing_repo import BillingRepository
from app.application.ports.pickup_point_repo import PickupPointRepository
from app.application.ports.route_pickup_point_repo import RoutePickupPointRepository
from app.application.ports.route_repo import RouteRepository
from app.application.ports.route_vehicle_repo import RouteVehicleRepository
from app.application.ports.student_repo import StudentRepository
from app.application.ports.transport_assignment_repo import TransportAssignmentRepository
from app.application.ports.transport_fee_repo import TransportFeeRepository
from app.application.ports.unit_of_work import UnitOfWork
from app.application.ports.vehicle_repo import VehicleRepository
from app.application.services.fee_master_service import FeeMasterService
from app.application.services.pickup_point_service import PickupPointService
from app.application.services.route_pickup_point_service import RoutePickupPointService
from app.application.services.route_service import RouteService
from app.application.services.route_vehicle_service import RouteVehicleService
from app.application.services.student_service import StudentService
from app.application.services.student_transport_service import StudentTransportService
from app.application.services.vehicle_service import VehicleService
from app.application.use_cases.assign_student_transport import AssignStudentTransportUseCase
from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.domain.entities.student import Student
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.entities.vehicle import Vehicle
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.pagination import Page

# Mid-month so billing lands on a predictable period
FIXED_NOW = datetime(2024, 6, 20, 9, 30, tzinfo=timezone.utc)

TABLES = (
    "students", "routes", "pickup_points", "stops", "vehicles", "route_vehicles",
    "fees", "assignments", "fee_types", "fee_masters", "fee_assignments",
)


class FakeStore:
    """Shared tables; rows are deep-copied in and out like a real database."""

    def __init__(self):
        for name in TABLES:
            setattr(self, name, {})
        self._seq = 0
        self.fail_on: set[str] = set()

    def insert(self, table: str, obj):
        obj.id = uuid.uuid4()
        if hasattr(obj, "created_at"):
            self._seq += 1
            obj.created_at = FIXED_NOW - timedelta(days=1) + timedelta(seconds=self._seq)
        getattr(self, table)[obj.id] = copy.deepcopy(obj)
        return obj

    def put(self, table: str, obj):
        getattr(self, table)[obj.id] = copy.deepcopy(obj)
        return copy.deepcopy(obj)

    def get(self, table: str, pk):
        row = getattr(self, table).get(pk)
        return copy.deepcopy(row) if row is not None else None

    def rows(self, table: str) -> list:
        return [copy.deepcopy(r) for r in getattr(self, table).values()]

    def snapshot(self) -> dict:
        return {name: copy.deepcopy(getattr(self, name)) for name in TABLES}

    def restore(self, snap: dict) -> None:
        for name, rows in snap.items():
            setattr(self, name, rows)

    def check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} failed")


def _page(items: list, page) -> Page:
    items = sorted(items, key=lambda x: x.created_at, reverse=True)
    return Page(items=items[page.offset:page.offset + page.limit], total=len(items), request=page)


def _contains(term: str | None, *values) -> bool:
    needle = (term or "").strip().lower()
    return any(needle in v.lower() for v in values if v)


# ─── In-memory fakes ────────────────────────────────────────────────


class FakeUnitOfWork(UnitOfWork):
    def __init__(self, store: FakeStore):
        self._store = store
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def atomic(self):
        snap = self._store.snapshot()
        try:
            yield
        except BaseException:
            self._store.restore(snap)
            self.rollbacks += 1
            raise
        self.commits += 1


class FakeStudentRepo(StudentRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    async def save(self, student):
        return self._store.insert("students", student)

    async def get_by_id(self, student_id):
        return self._store.get("students", student_id)

    async def get_by_admission_number(self, admission_number):
        return next(
            (s for s in self._store.rows("students") if s.admission_number == admission_number),
            None,
        )

    async def list(self, filters, page):
        items = [
            s for s in self._store.rows("students")
            if (filters.is_active is None or s.is_active == filters.is_active)
            and (not filters.search or _contains(
                filters.search, s.admission_number, s.first_name, s.last_name, s.email
            ))
        ]
        return _page(items, page)

    async def search_active(self, query, limit):
        items = [s for s in self._store.rows("students") if s.is_active and s.matches(query)]
        return sorted(items, key=lambda s: s.admission_number)[:limit]

    async def update(self, student):
        return self._store.put("students", student)


class FakeRouteRepo(RouteRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    async def save(self, route):
        return self._store.insert("routes", route)

    async def get_by_id(self, route_id):
        return self._store.get("routes", route_id)

    async def get_by_name(self, route_name):
        return next((r for r in self._store.rows("routes") if r.route_name == route_name), None)

    async def get_by_code(self, route_code):
        return next((r for r in self._store.rows("routes") if r.route_code == route_code), None)

    async def list(self, filters, page):
        items = [
            r for r in self._store.rows("routes")
            if (filters.is_active is None or r.is_active == filters.is_active)
            and (not filters.search or _contains(
                filters.search, r.route_name, r.route_code, r.start_point, r.end_point
            ))
        ]
        for r in items:
            r.counts = {
                "pickupPoints": sum(1 for s in self._store.stops.values() if s.route_id == r.id),
                "vehicleAssignments": sum(
                    1 for a in self._store.route_vehicles.values() if a.route_id == r.id
                ),
                "studentAssignments": sum(
                    1 for a in self._store.assignments.values() if a.route_id == r.id
                ),
            }
        return _page(items, page)

    async def update(self, route):
        return self._store.put("routes", route)


class FakePickupPointRepo(PickupPointRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    async def save(self, pickup_point):
        return self._store.insert("pickup_points", pickup_point)

    async def get_by_id(self, pickup_point_id):
        return self._store.get("pickup_points", pickup_point_id)

    async def list(self, filters, page):
        items = [
            p for p in self._store.rows("pickup_points")
            if (filters.is_active is None or p.is_active == filters.is_active)
            and (not filters.search or _contains(filters.search, p.name, p.address))
        ]
        return _page(items, page)

    async def update(self, pickup_point):
        return self._store.put("pickup_points", pickup_point)


class FakeRoutePickupPointRepo(RoutePickupPointRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    def _with_relations(self, stop):
        stop.route = self._store.get("routes", stop.route_id)
        stop.pickup_point = self._store.get("pickup_points", stop.pickup_point_id)
        return stop

    async def save(self, stop):
        return self._store.insert("stops", stop)

    async def get_by_id(self, stop_id):
        return self._store.get("stops", stop_id)

    async def find(self, route_id, pickup_point_id):
        return next(
            (s for s in self._store.rows("stops")
             if s.route_id == route_id and s.pickup_point_id == pickup_point_id),
            None,
        )

    async def list_for_route(self, route_id):
        stops = [s for s in self._store.rows("stops") if s.route_id == route_id]
        return [self._with_relations(s) for s in sorted(stops, key=lambda s: s.sequence_order)]

    async def count_for_pickup_point(self, pickup_point_id):
        return sum(1 for s in self._store.stops.values() if s.pickup_point_id == pickup_point_id)

    async def update(self, stop):
        stored = self._store.put("stops", stop)
        return self._with_relations(stored)

    async def delete(self, stop_id):
        self._store.stops.pop(stop_id, None)


class FakeVehicleRepo(VehicleRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    async def save(self, vehicle):
        return self._store.insert("vehicles", vehicle)

    async def get_by_id(self, vehicle_id):
        return self._store.get("vehicles", vehicle_id)

    async def get_by_number(self, vehicle_number):
        return next(
            (v for v in self._store.rows("vehicles") if v.vehicle_number == vehicle_number), None
        )

    async def list(self, filters, page):
        items = [
            v for v in self._store.rows("vehicles")
            if (filters.is_active is None or v.is_active == filters.is_active)
            and (not filters.search or _contains(filters.search, v.vehicle_number, v.driver_name))
        ]
        return _page(items, page)

    async def update(self, vehicle):
        return self._store.put("vehicles", vehicle)


class FakeRouteVehicleRepo(RouteVehicleRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    def _with_relations(self, a):
        a.route = self._store.get("routes", a.route_id)
        a.vehicle = self._store.get("vehicles", a.vehicle_id)
        return a

    async def save(self, assignment):
        return self._store.insert("route_vehicles", assignment)

    async def get_by_id(self, assignment_id):
        return self._store.get("route_vehicles", assignment_id)

    async def find_active(self, route_id, vehicle_id, shift):
        return next(
            (a for a in self._store.rows("route_vehicles")
             if a.route_id == route_id and a.vehicle_id == vehicle_id
             and a.shift == shift and a.is_active),
            None,
        )

    async def list(self, filters, page):
        items = [
            self._with_relations(a) for a in self._store.rows("route_vehicles")
            if (filters.route_id is None or a.route_id == filters.route_id)
            and (filters.vehicle_id is None or a.vehicle_id == filters.vehicle_id)
            and (filters.is_active is None or a.is_active == filters.is_active)
        ]
        return _page(items, page)

    async def list_active_for_route(self, route_id):
        return [
            self._with_relations(a) for a in self._store.rows("route_vehicles")
            if a.route_id == route_id and a.is_active
        ]

    async def count_active_for_vehicle(self, vehicle_id):
        return sum(
            1 for a in self._store.route_vehicles.values()
            if a.vehicle_id == vehicle_id and a.is_active
        )

    async def update(self, assignment):
        return self._store.put("route_vehicles", assignment)


class FakeTransportFeeRepo(TransportFeeRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    def _with_route(self, fee):
        fee.route = self._store.get("routes", fee.route_id) if fee.route_id else None
        return fee

    async def save(self, fee):
        return self._store.insert("fees", fee)

    async def get_by_id(self, fee_id):
        fee = self._store.get("fees", fee_id)
        return self._with_route(fee) if fee else None

    async def find_active(self, route_id, academic_year):
        return next(
            (f for f in self._store.rows("fees")
             if f.route_id == route_id and f.academic_year == academic_year and f.is_active),
            None,
        )

    async def list(self, filters, page):
        items = [
            self._with_route(f) for f in self._store.rows("fees")
            if (filters.route_id is None or f.route_id == filters.route_id)
            and (not filters.academic_year or f.academic_year == filters.academic_year)
            and (filters.is_active is None or f.is_active == filters.is_active)
        ]
        return _page(items, page)

    async def list_active_for_route(self, route_id):
        return [f for f in self._store.rows("fees") if f.route_id == route_id and f.is_active]

    async def update(self, fee):
        return self._with_route(self._store.put("fees", fee))


class FakeAssignmentRepo(TransportAssignmentRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    def _with_relations(self, a):
        a.student = self._store.get("students", a.student_id)
        a.route = self._store.get("routes", a.route_id)
        a.pickup_point = self._store.get("pickup_points", a.pickup_point_id)
        return a

    @staticmethod
    def _matches(a, filters) -> bool:
        return (
            (filters.student_id is None or a.student_id == filters.student_id)
            and (filters.route_id is None or a.route_id == filters.route_id)
            and (filters.pickup_point_id is None or a.pickup_point_id == filters.pickup_point_id)
            and (filters.status is None or a.status == filters.status)
        )

    async def save(self, assignment):
        self._store.check("save_assignment")
        return self._store.insert("assignments", assignment)

    async def get_by_id(self, assignment_id):
        a = self._store.get("assignments", assignment_id)
        return self._with_relations(a) if a else None

    async def find_active_for_student(self, student_id):
        return next(
            (a for a in self._store.rows("assignments")
             if a.student_id == student_id and a.status == AssignmentStatus.ACTIVE),
            None,
        )

    async def list(self, filters, page):
        items = [
            self._with_relations(a) for a in self._store.rows("assignments")
            if self._matches(a, filters)
        ]
        return _page(items, page)

    async def count(self, filters):
        return sum(1 for a in self._store.assignments.values() if self._matches(a, filters))

    async def update(self, assignment):
        return self._store.put("assignments", assignment)


class FakeBillingRepo(BillingRepository):
    def __init__(self, store: FakeStore):
        self._store = store

    async def get_fee_type_by_name(self, name):
        return next((t for t in self._store.rows("fee_types") if t.name == name), None)

    async def save_fee_type(self, fee_type):
        return self._store.insert("fee_types", fee_type)

    async def find_active_fee_master(self, fee_type_id, academic_year):
        return next(
            (m for m in self._store.rows("fee_masters")
             if m.fee_type_id == fee_type_id and m.academic_year == academic_year and m.is_active),
            None,
        )

    async def save_fee_master(self, fee_master):
        return self._store.insert("fee_masters", fee_master)

    async def find_fee_assignment(self, student_id, fee_master_id, month, year):
        return next(
            (f for f in self._store.rows("fee_assignments")
             if f.student_id == student_id and f.fee_master_id == fee_master_id
             and f.month == month and f.year == year),
            None,
        )

    async def save_fee_assignment(self, fee):
        self._store.check("save_fee_assignment")
        return self._store.insert("fee_assignments", fee)


# ─── World: repos, services and sample data over one store ──────────


class World:
    def __init__(self):
        self.store = FakeStore()
        self.uow = FakeUnitOfWork(self.store)
        self.students = FakeStudentRepo(self.store)
        self.routes = FakeRouteRepo(self.store)
        self.pickup_points = FakePickupPointRepo(self.store)
        self.stops = FakeRoutePickupPointRepo(self.store)
        self.vehicles = FakeVehicleRepo(self.store)
        self.route_vehicles = FakeRouteVehicleRepo(self.store)
        self.fees = FakeTransportFeeRepo(self.store)
        self.assignments = FakeAssignmentRepo(self.store)
        self.billing = FakeBillingRepo(self.store)
        self.now = FIXED_NOW

    def clock(self) -> datetime:
        return self.now

    # Services

    def assign_use_case(self) -> AssignStudentTransportUseCase:
        return AssignStudentTransportUseCase(
            student_repo=self.students,
            route_repo=self.routes,
            stop_repo=self.stops,
            assignment_repo=self.assignments,
            fee_repo=self.fees,
            billing_repo=self.billing,
            uow=self.uow,
            clock=self.clock,
        )

    def student_service(self) -> StudentService:
        return StudentService(self.students, self.assignments, self.uow)

    def route_service(self) -> RouteService:
        return RouteService(
            self.routes, self.stops, self.route_vehicles, self.fees, self.assignments, self.uow
        )

    def vehicle_service(self) -> VehicleService:
        return VehicleService(self.vehicles, self.route_vehicles, self.uow)

    def pickup_point_service(self) -> PickupPointService:
        return PickupPointService(self.pickup_points, self.stops, self.uow)

    def fee_master_service(self) -> FeeMasterService:
        return FeeMasterService(self.fees, self.routes, self.uow)

    def route_pickup_point_service(self) -> RoutePickupPointService:
        return RoutePickupPointService(
            self.routes, self.pickup_points, self.stops, self.assignments, self.uow
        )

    def route_vehicle_service(self) -> RouteVehicleService:
        return RouteVehicleService(
            self.routes, self.vehicles, self.route_vehicles, self.uow, clock=self.clock
        )

    def student_transport_service(self) -> StudentTransportService:
        return StudentTransportService(self.assignments, self.uow, clock=self.clock)

    # Sample data

    def add_student(self, admission_number="STD001", first_name="Rahim", last_name="Ahmed",
                    is_active=True, **kwargs) -> Student:
        return self.store.insert("students", Student(
            id=None, admission_number=admission_number, first_name=first_name,
            last_name=last_name, class_name=kwargs.pop("class_name", "Class 10"),
            is_active=is_active, **kwargs,
        ))

    def add_route(self, route_name="Route A - Mohammadpur to School", route_code="RTA",
                  is_active=True) -> Route:
        return self.store.insert("routes", Route(
            id=None, route_name=route_name, route_code=route_code,
            start_point="Mohammadpur", end_point="ABC School", is_active=is_active,
        ))

    def add_pickup_point(self, name="Mohammadpur Bus Stop", address="Mohammadpur, Dhaka") -> PickupPoint:
        return self.store.insert("pickup_points", PickupPoint(id=None, name=name, address=address))

    def add_stop(self, route: Route, point: PickupPoint, sequence_order=1) -> RoutePickupPoint:
        return self.store.insert("stops", RoutePickupPoint(
            id=None, route_id=route.id, pickup_point_id=point.id, sequence_order=sequence_order,
        ))

    def add_vehicle(self, vehicle_number="DHK-GA-11-1234", driver_name="Karim Mia") -> Vehicle:
        return self.store.insert("vehicles", Vehicle(
            id=None, vehicle_number=vehicle_number, driver_name=driver_name,
            driver_phone="01912345678", vehicle_type="Bus", capacity=40,
        ))

    def add_fee(self, route: Route | None, monthly_fee="1500", academic_year="2024-2025",
                is_active=True, zone_name=None) -> TransportFeeMaster:
        return self.store.insert("fees", TransportFeeMaster(
            id=None, route_id=route.id if route else None, zone_name=zone_name,
            monthly_fee=Decimal(monthly_fee), academic_year=academic_year, is_active=is_active,
        ))

    def add_served_route(self, route_code="RTA", route_name=None, point_name=None,
                         monthly_fee="1500", academic_year="2024-2025"):
        """Active route with one stop and an active fee; returns (route, pickup point)."""
        route = self.add_route(route_name=route_name or f"Route {route_code}", route_code=route_code)
        point = self.add_pickup_point(name=point_name or f"Stop on {route_code}")
        self.add_stop(route, point)
        self.add_fee(route, monthly_fee=monthly_fee, academic_year=academic_year)
        return route, point


@pytest.fixture
def world() -> World:
    return World()
