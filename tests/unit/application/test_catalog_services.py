"""Student, route, vehicle and pickup point services over in-memory fakes."""

from __future__ import annotations

import uuid

import pytest

from app.application.ports.pickup_point_repo import PickupPointFilter
from app.application.ports.route_repo import RouteFilter
from app.application.ports.student_repo import StudentFilter
from app.application.ports.vehicle_repo import VehicleFilter
from app.application.use_cases.assign_student_transport import AssignmentRequest
from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.entities.student import Student
from app.domain.entities.vehicle import Vehicle
from app.domain.errors import ConflictError, InvalidStateError, NotFoundError
from app.domain.value_objects.geo_point import GeoPoint
from app.domain.value_objects.pagination import PageRequest


async def _assign(world, student, route, point):
    await world.assign_use_case().execute(
        AssignmentRequest(student_id=student.id, route_id=route.id, pickup_point_id=point.id),
        "2024-2025",
    )


# ─── Students ───────────────────────────────────────────────────────


class TestStudentService:
    @pytest.mark.asyncio
    async def test_create_rejects_duplicate_admission_number(self, world):
        world.add_student("STD001")
        svc = world.student_service()

        with pytest.raises(ConflictError, match="admission number already exists"):
            await svc.create(Student(
                id=None, admission_number="STD001", first_name="A", last_name="B",
                class_name="Class 9",
            ))

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, world):
        saved = await world.student_service().create(Student(
            id=None, admission_number="STD010", first_name="Nadia", last_name="Islam",
            class_name="Class 7",
        ))
        assert saved.id is not None
        assert saved.is_active is True

    @pytest.mark.asyncio
    async def test_list_filters_and_paginates_newest_first(self, world):
        for i in range(12):
            world.add_student(f"STD{i:03d}")
        world.add_student("OLD001", is_active=False)
        svc = world.student_service()

        page = await svc.list(StudentFilter(is_active=True), PageRequest.of(2, 5))

        assert page.total == 12
        assert page.pagination() == {"total": 12, "page": 2, "limit": 5, "totalPages": 3}
        assert [s.admission_number for s in page.items] == [
            "STD006", "STD005", "STD004", "STD003", "STD002",
        ]

    @pytest.mark.asyncio
    async def test_list_search_is_case_insensitive(self, world):
        world.add_student("STD001", first_name="Rahim")
        world.add_student("STD002", first_name="Fatima")

        page = await world.student_service().list(StudentFilter(search="fat"), PageRequest())

        assert [s.first_name for s in page.items] == ["Fatima"]

    @pytest.mark.asyncio
    async def test_get_unknown_is_not_found(self, world):
        with pytest.raises(NotFoundError, match="Student not found"):
            await world.student_service().get(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_update_applies_only_given_fields(self, world):
        student = world.add_student(section="A")

        updated = await world.student_service().update(student.id, {"section": "B"})

        assert updated.section == "B"
        assert updated.first_name == student.first_name

    @pytest.mark.asyncio
    async def test_update_to_taken_admission_number_conflicts(self, world):
        world.add_student("STD001")
        other = world.add_student("STD002")

        with pytest.raises(ConflictError):
            await world.student_service().update(other.id, {"admission_number": "STD001"})

    @pytest.mark.asyncio
    async def test_update_keeping_own_admission_number_is_fine(self, world):
        student = world.add_student("STD001")

        updated = await world.student_service().update(
            student.id, {"admission_number": "STD001", "phone": "01700000000"}
        )
        assert updated.phone == "01700000000"

    @pytest.mark.asyncio
    async def test_deactivate_blocked_by_active_assignment(self, world):
        student = world.add_student()
        route, point = world.add_served_route()
        await _assign(world, student, route, point)

        with pytest.raises(InvalidStateError, match="active transport assignments"):
            await world.student_service().deactivate(student.id)

    @pytest.mark.asyncio
    async def test_deactivate_is_soft(self, world):
        student = world.add_student()

        await world.student_service().deactivate(student.id)

        stored = await world.students.get_by_id(student.id)
        assert stored is not None
        assert stored.is_active is False

    @pytest.mark.asyncio
    async def test_search_matches_active_students_only(self, world):
        world.add_student("STD001", first_name="Rahim")
        world.add_student("STD002", first_name="Rahima", is_active=False)
        world.add_student("STD003", last_name="Rahman")
        svc = world.student_service()

        found = await svc.search("RAH")

        assert [s.admission_number for s in found] == ["STD001", "STD003"]

    @pytest.mark.asyncio
    async def test_search_blank_query_returns_nothing(self, world):
        world.add_student()
        svc = world.student_service()

        assert await svc.search("") == []
        assert await svc.search("   ") == []
        assert await svc.search(None) == []

    @pytest.mark.asyncio
    async def test_search_caps_results(self, world):
        for i in range(15):
            world.add_student(f"STD{i:03d}")

        assert len(await world.student_service().search("STD")) == 10


# ─── Routes ─────────────────────────────────────────────────────────


class TestRouteService:
    @pytest.mark.asyncio
    async def test_create_rejects_duplicate_name_and_code(self, world):
        world.add_route(route_name="Route A", route_code="RTA")
        svc = world.route_service()

        with pytest.raises(ConflictError, match="name already exists"):
            await svc.create(Route(id=None, route_name="Route A", start_point="x", end_point="y"))
        with pytest.raises(ConflictError, match="code already exists"):
            await svc.create(Route(
                id=None, route_name="Route B", route_code="RTA", start_point="x", end_point="y",
            ))

    @pytest.mark.asyncio
    async def test_create_without_code_skips_code_check(self, world):
        world.add_route(route_name="Route A", route_code="RTA")

        saved = await world.route_service().create(
            Route(id=None, route_name="Route B", start_point="x", end_point="y")
        )
        assert saved.route_code is None

    @pytest.mark.asyncio
    async def test_list_reports_relation_counts(self, world):
        student = world.add_student()
        route, point = world.add_served_route()
        world.add_route(route_name="Empty", route_code="EMP")
        await _assign(world, student, route, point)

        page = await world.route_service().list(RouteFilter(search="rta"), PageRequest())

        (listed,) = page.items
        assert listed.counts == {
            "pickupPoints": 1, "vehicleAssignments": 0, "studentAssignments": 1,
        }

    @pytest.mark.asyncio
    async def test_detail_orders_stops_and_keeps_active_fees(self, world):
        route = world.add_route()
        late = world.add_pickup_point(name="Late")
        early = world.add_pickup_point(name="Early")
        world.add_stop(route, late, sequence_order=2)
        world.add_stop(route, early, sequence_order=1)
        world.add_fee(route, academic_year="2023-2024", is_active=False)
        world.add_fee(route, academic_year="2024-2025")

        detail = await world.route_service().get_detail(route.id)

        assert [s.pickup_point.name for s in detail.pickup_points] == ["Early", "Late"]
        assert [f.academic_year for f in detail.transport_fees] == ["2024-2025"]
        assert detail.vehicle_assignments == []

    @pytest.mark.asyncio
    async def test_update_to_own_name_is_not_a_conflict(self, world):
        route = world.add_route(route_name="Route A", route_code="RTA")

        updated = await world.route_service().update(
            route.id, {"route_name": "Route A", "distance": 12.5}
        )
        assert updated.distance == 12.5

    @pytest.mark.asyncio
    async def test_update_to_taken_code_conflicts(self, world):
        world.add_route(route_name="Route A", route_code="RTA")
        other = world.add_route(route_name="Route B", route_code="RTB")

        with pytest.raises(ConflictError):
            await world.route_service().update(other.id, {"route_code": "RTA"})

    @pytest.mark.asyncio
    async def test_deactivate_blocked_by_active_students(self, world):
        student = world.add_student()
        route, point = world.add_served_route()
        await _assign(world, student, route, point)

        with pytest.raises(InvalidStateError, match="active student assignments"):
            await world.route_service().deactivate(route.id)

    @pytest.mark.asyncio
    async def test_deactivate_leaves_stops_in_place(self, world):
        route, _ = world.add_served_route()

        updated = await world.route_service().deactivate(route.id)

        assert updated.is_active is False
        assert len(world.store.stops) == 1


# ─── Vehicles ───────────────────────────────────────────────────────


class TestVehicleService:
    @pytest.mark.asyncio
    async def test_create_rejects_duplicate_number(self, world):
        world.add_vehicle("DHK-1")

        with pytest.raises(ConflictError, match="Vehicle with this number"):
            await world.vehicle_service().create(
                Vehicle(id=None, vehicle_number="DHK-1", driver_name="X", driver_phone="1")
            )

    @pytest.mark.asyncio
    async def test_update_number_collision_excludes_self(self, world):
        own = world.add_vehicle("DHK-1")
        world.add_vehicle("DHK-2")
        svc = world.vehicle_service()

        updated = await svc.update(own.id, {"vehicle_number": "DHK-1", "capacity": 30})
        assert updated.capacity == 30
        with pytest.raises(ConflictError):
            await svc.update(own.id, {"vehicle_number": "DHK-2"})

    @pytest.mark.asyncio
    async def test_deactivate_blocked_while_serving_a_route(self, world):
        vehicle = world.add_vehicle()
        route = world.add_route()
        await world.route_vehicle_service().assign(
            RouteVehicleAssignment(id=None, route_id=route.id, vehicle_id=vehicle.id)
        )

        with pytest.raises(InvalidStateError, match="active route assignments"):
            await world.vehicle_service().deactivate(vehicle.id)

    @pytest.mark.asyncio
    async def test_list_search_by_driver(self, world):
        world.add_vehicle("DHK-1", driver_name="Karim Mia")
        world.add_vehicle("DHK-2", driver_name="Salam")

        page = await world.vehicle_service().list(VehicleFilter(search="karim"), PageRequest())

        assert [v.vehicle_number for v in page.items] == ["DHK-1"]


# ─── Pickup points ──────────────────────────────────────────────────


class TestPickupPointService:
    @pytest.mark.asyncio
    async def test_create_and_get(self, world):
        svc = world.pickup_point_service()
        saved = await svc.create(PickupPoint(
            id=None, name="Dhanmondi 27", address="Dhanmondi, Dhaka",
            location=GeoPoint(23.7461, 90.3742),
        ))

        fetched = await svc.get(saved.id)
        assert fetched.location == GeoPoint(23.7461, 90.3742)

    @pytest.mark.asyncio
    async def test_update_one_coordinate_keeps_the_other(self, world):
        point = world.store.insert("pickup_points", PickupPoint(
            id=None, name="P", address="A", location=GeoPoint(23.0, 90.0),
        ))

        updated = await world.pickup_point_service().update(point.id, {"latitude": 24.5})

        assert updated.location == GeoPoint(24.5, 90.0)

    @pytest.mark.asyncio
    async def test_update_single_coordinate_without_stored_location_stays_empty(self, world):
        point = world.add_pickup_point()

        updated = await world.pickup_point_service().update(point.id, {"longitude": 90.1})

        assert updated.location is None

    @pytest.mark.asyncio
    async def test_deactivate_blocked_while_on_a_route(self, world):
        _, point = world.add_served_route()

        with pytest.raises(InvalidStateError, match="assigned to routes"):
            await world.pickup_point_service().deactivate(point.id)

    @pytest.mark.asyncio
    async def test_deactivate_free_point(self, world):
        point = world.add_pickup_point()
        svc = world.pickup_point_service()

        await svc.deactivate(point.id)

        page = await svc.list(PickupPointFilter(is_active=False), PageRequest())
        assert [p.id for p in page.items] == [point.id]
