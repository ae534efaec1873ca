"""Entity -> camelCase JSON dicts for API responses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from app.application.services.route_service import RouteDetail
from app.domain.entities.billing import StudentFeeAssignment
from app.domain.entities.pickup_point import PickupPoint
from app.domain.entities.route import Route
from app.domain.entities.route_pickup_point import RoutePickupPoint
from app.domain.entities.route_vehicle import RouteVehicleAssignment
from app.domain.entities.student import Student
from app.domain.entities.transport_assignment import StudentTransportAssignment
from app.domain.entities.transport_fee import TransportFeeMaster
from app.domain.entities.vehicle import Vehicle


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _money(value: Decimal | None) -> str | None:
    # Two decimals, as stored
    return f"{Decimal(value):.2f}" if value is not None else None


def _id(value) -> str | None:
    return str(value) if value is not None else None


def serialize_student(s: Student) -> dict:
    return {
        "id": _id(s.id),
        "admissionNumber": s.admission_number,
        "firstName": s.first_name,
        "lastName": s.last_name,
        "class": s.class_name,
        "section": s.section,
        "rollNumber": s.roll_number,
        "email": s.email,
        "phone": s.phone,
        "parentName": s.parent_name,
        "parentPhone": s.parent_phone,
        "address": s.address,
        "isActive": s.is_active,
        "createdAt": _ts(s.created_at),
    }


def serialize_route(r: Route) -> dict:
    data = {
        "id": _id(r.id),
        "routeName": r.route_name,
        "routeCode": r.route_code,
        "startPoint": r.start_point,
        "endPoint": r.end_point,
        "distance": r.distance,
        "estimatedDuration": r.estimated_duration,
        "isActive": r.is_active,
        "createdAt": _ts(r.created_at),
    }
    if r.counts:
        data["_count"] = dict(r.counts)
    return data


def serialize_pickup_point(p: PickupPoint) -> dict:
    return {
        "id": _id(p.id),
        "name": p.name,
        "address": p.address,
        "latitude": p.location.latitude if p.location else None,
        "longitude": p.location.longitude if p.location else None,
        "landmark": p.landmark,
        "isActive": p.is_active,
        "createdAt": _ts(p.created_at),
    }


def serialize_vehicle(v: Vehicle) -> dict:
    return {
        "id": _id(v.id),
        "vehicleNumber": v.vehicle_number,
        "vehicleType": v.vehicle_type,
        "capacity": v.capacity,
        "driverName": v.driver_name,
        "driverPhone": v.driver_phone,
        "driverLicense": v.driver_license,
        "helperName": v.helper_name,
        "helperPhone": v.helper_phone,
        "registrationNumber": v.registration_number,
        "insuranceExpiry": _ts(v.insurance_expiry),
        "fitnessExpiry": _ts(v.fitness_expiry),
        "isActive": v.is_active,
        "createdAt": _ts(v.created_at),
    }


def serialize_route_pickup_point(s: RoutePickupPoint) -> dict:
    return {
        "id": _id(s.id),
        "routeId": _id(s.route_id),
        "pickupPointId": _id(s.pickup_point_id),
        "sequenceOrder": s.sequence_order,
        "estimatedTime": s.estimated_time,
        "distanceFromStart": s.distance_from_start,
        "route": serialize_route(s.route) if s.route else None,
        "pickupPoint": serialize_pickup_point(s.pickup_point) if s.pickup_point else None,
    }


def serialize_route_vehicle(a: RouteVehicleAssignment) -> dict:
    return {
        "id": _id(a.id),
        "routeId": _id(a.route_id),
        "vehicleId": _id(a.vehicle_id),
        "validFrom": _ts(a.valid_from),
        "validTo": _ts(a.valid_to),
        "shift": a.shift.value if a.shift else None,
        "isActive": a.is_active,
        "createdAt": _ts(a.created_at),
        "route": serialize_route(a.route) if a.route else None,
        "vehicle": serialize_vehicle(a.vehicle) if a.vehicle else None,
    }


def serialize_fee_master(f: TransportFeeMaster) -> dict:
    return {
        "id": _id(f.id),
        "routeId": _id(f.route_id),
        "zoneName": f.zone_name,
        "monthlyFee": _money(f.monthly_fee),
        "description": f.description,
        "academicYear": f.academic_year,
        "isActive": f.is_active,
        "createdAt": _ts(f.created_at),
        "route": serialize_route(f.route) if f.route else None,
    }


def serialize_assignment(a: StudentTransportAssignment) -> dict:
    return {
        "id": _id(a.id),
        "studentId": _id(a.student_id),
        "routeId": _id(a.route_id),
        "pickupPointId": _id(a.pickup_point_id),
        "validFrom": _ts(a.valid_from),
        "validTo": _ts(a.valid_to),
        "shift": a.shift.value if a.shift else None,
        "monthlyFee": _money(a.monthly_fee),
        "status": a.status.value,
        "createdBy": a.created_by,
        "createdAt": _ts(a.created_at),
        "student": serialize_student(a.student) if a.student else None,
        "route": serialize_route(a.route) if a.route else None,
        "pickupPoint": serialize_pickup_point(a.pickup_point) if a.pickup_point else None,
    }


def serialize_fee_assignment(f: StudentFeeAssignment | None) -> dict | None:
    if f is None:
        return None
    return {
        "id": _id(f.id),
        "studentId": _id(f.student_id),
        "feeMasterId": _id(f.fee_master_id),
        "amount": _money(f.amount),
        "month": f.month,
        "year": f.year,
        "dueDate": _ts(f.due_date),
        "status": f.status.value,
        "createdBy": f.created_by,
        "createdAt": _ts(f.created_at),
    }


def serialize_route_detail(d: RouteDetail) -> dict:
    data = serialize_route(d.route)
    data["pickupPoints"] = [serialize_route_pickup_point(s) for s in d.pickup_points]
    data["vehicleAssignments"] = [serialize_route_vehicle(a) for a in d.vehicle_assignments]
    data["transportFees"] = [serialize_fee_master(f) for f in d.transport_fees]
    return data
