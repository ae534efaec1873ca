"""HTTP tests for the CRUD endpoints and route associations."""

from __future__ import annotations

import uuid

import pytest

BASE = "/api/transport"


# ─── Students ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_create_student_uses_class_key(client):
    resp = await client.post(f"{BASE}/students", json={
        "admissionNumber": "STD100", "firstName": "Nadia", "lastName": "Islam",
        "class": "Class 7", "section": "B",
    })

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["class"] == "Class 7"
    assert data["isActive"] is True
    uuid.UUID(data["id"])


@pytest.mark.asyncio
async def test_create_student_duplicate_is_409(client, world):
    world.add_student("STD001")

    resp = await client.post(f"{BASE}/students", json={
        "admissionNumber": "STD001", "firstName": "A", "lastName": "B", "class": "C",
    })

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_student_search_route_is_not_an_id(client, world):
    world.add_student("STD001", first_name="Rahim")
    world.add_student("STD002", first_name="Fatima")

    resp = await client.get(f"{BASE}/students/search", params={"q": "fat"})
    blank = await client.get(f"{BASE}/students/search")

    assert resp.status_code == 200
    assert [s["firstName"] for s in resp.json()["data"]] == ["Fatima"]
    assert blank.json()["data"] == []


@pytest.mark.asyncio
async def test_list_students_paginates(client, world):
    for i in range(3):
        world.add_student(f"STD{i:03d}")

    resp = await client.get(f"{BASE}/students", params={"page": 1, "limit": 2})

    body = resp.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}


@pytest.mark.asyncio
async def test_update_student_partial(client, world):
    student = world.add_student()

    resp = await client.put(f"{BASE}/students/{student.id}", json={"phone": "01711111111"})

    data = resp.json()["data"]
    assert data["phone"] == "01711111111"
    assert data["firstName"] == "Rahim"


@pytest.mark.asyncio
async def test_delete_student_is_soft(client, world):
    student = world.add_student()

    resp = await client.delete(f"{BASE}/students/{student.id}")

    assert resp.status_code == 200
    assert resp.json()["data"]["isActive"] is False
    assert (await client.get(f"{BASE}/students/{student.id}")).status_code == 200


@pytest.mark.asyncio
async def test_unknown_student_is_404(client):
    resp = await client.get(f"{BASE}/students/{uuid.uuid4()}")

    assert resp.status_code == 404
    assert resp.json()["message"] == "Student not found"


@pytest.mark.asyncio
async def test_malformed_id_is_400(client):
    resp = await client.get(f"{BASE}/students/not-a-uuid")

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "student_id"


# ─── Routes ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_route_crud_and_detail(client, world):
    created = await client.post(f"{BASE}/routes", json={
        "routeName": "Route A", "routeCode": "RTA",
        "startPoint": "Mohammadpur", "endPoint": "ABC School", "distance": 8.5,
    })
    route_id = created.json()["data"]["id"]
    point = world.add_pickup_point()
    await client.post(f"{BASE}/route-pickup-points", json={
        "routeId": route_id, "pickupPointId": str(point.id), "sequenceOrder": 1,
    })

    detail = (await client.get(f"{BASE}/routes/{route_id}")).json()["data"]
    listed = (await client.get(f"{BASE}/routes")).json()["data"]

    assert created.status_code == 201
    assert detail["pickupPoints"][0]["pickupPoint"]["name"] == point.name
    assert detail["vehicleAssignments"] == []
    assert detail["transportFees"] == []
    assert listed[0]["_count"] == {
        "pickupPoints": 1, "vehicleAssignments": 0, "studentAssignments": 0,
    }


@pytest.mark.asyncio
async def test_route_missing_name_reports_field(client):
    resp = await client.post(f"{BASE}/routes", json={"startPoint": "a", "endPoint": "b"})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "routeName"


@pytest.mark.asyncio
async def test_route_update_rejects_null_required_columns(client, world):
    route = world.add_route()

    resp = await client.put(f"{BASE}/routes/{route.id}", json={"routeName": None, "startPoint": None})

    assert resp.status_code == 400
    assert sorted(e["field"] for e in resp.json()["errors"]) == ["routeName", "startPoint"]
    assert world.store.get("routes", route.id).route_name == route.route_name


@pytest.mark.asyncio
async def test_route_update_still_clears_nullable_columns(client, world):
    route = world.add_route()

    resp = await client.put(f"{BASE}/routes/{route.id}", json={"routeCode": None})

    assert resp.status_code == 200
    assert resp.json()["data"]["routeCode"] is None


# ─── Vehicles and pickup points ─────────────────────────────────────


@pytest.mark.asyncio
async def test_vehicle_create_with_lenient_expiry(client):
    resp = await client.post(f"{BASE}/vehicles", json={
        "vehicleNumber": "DHK-GA-11-1234", "driverName": "Karim Mia",
        "driverPhone": "01912345678", "capacity": 40,
        "insuranceExpiry": "2025-12-31", "fitnessExpiry": "n/a",
    })

    data = resp.json()["data"]
    assert resp.status_code == 201
    assert data["insuranceExpiry"].startswith("2025-12-31")
    assert data["fitnessExpiry"] is None


@pytest.mark.asyncio
async def test_vehicle_on_route_cannot_be_deleted(client, world):
    route = world.add_route()
    vehicle = world.add_vehicle()
    await client.post(f"{BASE}/route-vehicles", json={
        "routeId": str(route.id), "vehicleId": str(vehicle.id), "shift": "MORNING",
    })

    resp = await client.delete(f"{BASE}/vehicles/{vehicle.id}")

    assert resp.status_code == 400
    assert resp.json()["message"] == "Cannot delete vehicle with active route assignments"


@pytest.mark.asyncio
async def test_pickup_point_coordinates(client):
    created = await client.post(f"{BASE}/pickup-points", json={
        "name": "Dhanmondi 27", "address": "Dhanmondi, Dhaka",
        "latitude": 23.7461, "longitude": 90.3742,
    })
    point_id = created.json()["data"]["id"]

    updated = await client.put(f"{BASE}/pickup-points/{point_id}", json={"latitude": 23.75})

    assert updated.json()["data"]["latitude"] == 23.75
    assert updated.json()["data"]["longitude"] == 90.3742


@pytest.mark.asyncio
async def test_pickup_point_latitude_out_of_range(client):
    resp = await client.post(f"{BASE}/pickup-points", json={
        "name": "X", "address": "Y", "latitude": 123.0, "longitude": 90.0,
    })

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "latitude"


# ─── Fee masters ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fee_master_money_is_two_decimals(client, world):
    route = world.add_route()

    resp = await client.post(f"{BASE}/fee-master", json={
        "routeId": str(route.id), "monthlyFee": 1500, "academicYear": "2024-2025",
    })

    assert resp.status_code == 201
    assert resp.json()["data"]["monthlyFee"] == "1500.00"


@pytest.mark.asyncio
async def test_fee_master_needs_route_or_zone(client):
    resp = await client.post(f"{BASE}/fee-master", json={
        "monthlyFee": "1500", "academicYear": "2024-2025",
    })

    body = resp.json()
    assert resp.status_code == 400
    assert [e["field"] for e in body["errors"]] == ["routeId", "zoneName"]


@pytest.mark.asyncio
async def test_fee_master_rejects_non_positive_amount(client):
    resp = await client.post(f"{BASE}/fee-master", json={
        "zoneName": "North", "monthlyFee": 0, "academicYear": "2024-2025",
    })

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "monthlyFee"


@pytest.mark.asyncio
async def test_fee_master_list_by_year(client, world):
    route = world.add_route()
    world.add_fee(route, academic_year="2023-2024", is_active=False)
    world.add_fee(route, academic_year="2024-2025")

    resp = await client.get(f"{BASE}/fee-master", params={"academicYear": "2024-2025"})

    data = resp.json()["data"]
    assert [f["academicYear"] for f in data] == ["2024-2025"]
    assert data[0]["route"]["routeCode"] == route.route_code


# ─── Route associations ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_route_pickup_points_list_and_remove(client, world):
    route, _ = world.add_served_route()
    (stop,) = world.store.rows("stops")

    listed = await client.get(f"{BASE}/route-pickup-points/route/{route.id}")
    removed = await client.delete(f"{BASE}/route-pickup-points/{stop.id}")

    assert len(listed.json()["data"]) == 1
    assert removed.status_code == 200
    assert removed.json()["data"] is None


@pytest.mark.asyncio
async def test_duplicate_stop_is_409(client, world):
    route, point = world.add_served_route()

    resp = await client.post(f"{BASE}/route-pickup-points", json={
        "routeId": str(route.id), "pickupPointId": str(point.id), "sequenceOrder": 2,
    })

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_route_vehicle_deactivate(client, world):
    route = world.add_route()
    vehicle = world.add_vehicle()
    created = await client.post(f"{BASE}/route-vehicles", json={
        "routeId": str(route.id), "vehicleId": str(vehicle.id),
    })
    assignment_id = created.json()["data"]["id"]

    resp = await client.put(f"{BASE}/route-vehicles/{assignment_id}/deactivate")
    listed = await client.get(f"{BASE}/route-vehicles", params={"isActive": "false"})

    assert resp.json()["data"]["isActive"] is False
    assert resp.json()["data"]["validTo"] is not None
    assert [a["id"] for a in listed.json()["data"]] == [assignment_id]


@pytest.mark.asyncio
async def test_student_update_rejects_null_class(client, world):
    student = world.add_student()

    resp = await client.put(f"{BASE}/students/{student.id}", json={"class": None})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "class"


@pytest.mark.asyncio
async def test_fee_master_update_rejects_null_amount(client, world):
    fee = world.add_fee(world.add_route())

    resp = await client.put(f"{BASE}/fee-master/{fee.id}", json={"monthlyFee": None})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "monthlyFee"


@pytest.mark.asyncio
async def test_fee_master_update_cannot_drop_route_and_zone(client, world):
    fee = world.add_fee(world.add_route())

    resp = await client.put(f"{BASE}/fee-master/{fee.id}", json={"routeId": None, "zoneName": None})

    assert resp.status_code == 400
    assert [e["field"] for e in resp.json()["errors"]] == ["routeId", "zoneName"]
    assert world.store.get("fees", fee.id).route_id is not None
