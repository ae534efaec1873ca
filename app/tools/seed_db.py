"""Seed the database with a small sample dataset.

Usage:
    python -m app.tools.seed_db
    python -m app.tools.seed_db --academic-year 2025-2026
    python -m app.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import async_session_factory
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
from app.config import settings
from app.domain.policies.billing import (
    TRANSPORT_FEE_TYPE_CATEGORY,
    TRANSPORT_FEE_TYPE_DESCRIPTION,
    TRANSPORT_FEE_TYPE_NAME,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

STUDENTS = [
    {
        "admission_number": "STD001",
        "first_name": "Rahim",
        "last_name": "Ahmed",
        "email": "rahim@example.com",
        "phone": "01712345678",
        "class_name": "Class 10",
        "section": "A",
        "roll_number": "01",
        "parent_name": "Mr. Ahmed",
        "parent_phone": "01712345679",
        "address": "Dhaka, Bangladesh",
    },
    {
        "admission_number": "STD002",
        "first_name": "Fatima",
        "last_name": "Khan",
        "email": "fatima@example.com",
        "phone": "01812345678",
        "class_name": "Class 9",
        "section": "B",
        "roll_number": "05",
        "parent_name": "Mr. Khan",
        "parent_phone": "01812345679",
        "address": "Dhaka, Bangladesh",
    },
]

PICKUP_POINTS = [
    {"name": "Mohammadpur Bus Stop", "address": "Mohammadpur, Dhaka",
     "landmark": "Near Mohammadpur Market"},
    {"name": "Dhanmondi 27", "address": "Road 27, Dhanmondi, Dhaka",
     "landmark": "Near Rabindra Sarobar"},
    {"name": "Mirpur 10", "address": "Mirpur 10, Dhaka", "landmark": "Near Mirpur 10 Circle"},
]

VEHICLES = [
    {"vehicle_number": "DHK-GA-11-1234", "vehicle_type": "Bus", "capacity": 40,
     "driver_name": "Karim Mia", "driver_phone": "01912345678", "driver_license": "DL123456",
     "helper_name": "Rahim Mia", "helper_phone": "01912345679"},
    {"vehicle_number": "DHK-GA-11-5678", "vehicle_type": "Van", "capacity": 15,
     "driver_name": "Jamal Uddin", "driver_phone": "01812345670", "driver_license": "DL789012",
     "helper_name": "Salam Mia", "helper_phone": "01812345671"},
]

ROUTES = [
    {"route_name": "Route A - Mohammadpur to School", "route_code": "RTA",
     "start_point": "Mohammadpur", "end_point": "ABC School", "distance": 8.5,
     "estimated_duration": 45},
    {"route_name": "Route B - Dhanmondi to School", "route_code": "RTB",
     "start_point": "Dhanmondi", "end_point": "ABC School", "distance": 6.2,
     "estimated_duration": 35},
]

# (route code, pickup point name, sequence order, estimated time)
STOPS = [
    ("RTA", "Mohammadpur Bus Stop", 1, "07:00 AM"),
    ("RTA", "Mirpur 10", 2, "07:20 AM"),
    ("RTB", "Dhanmondi 27", 1, "07:10 AM"),
]

# route code -> (monthly fee, description)
FEES = {
    "RTA": (Decimal("1500"), "Monthly fee for Route A"),
    "RTB": (Decimal("1200"), "Monthly fee for Route B"),
}


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        StudentFeeAssignmentModel,
        FeeMasterModel,
        StudentTransportAssignmentModel,
        TransportFeeMasterModel,
        RouteVehicleAssignmentModel,
        RoutePickupPointModel,
        VehicleModel,
        PickupPointModel,
        RouteModel,
        StudentModel,
        FeeTypeModel,
    ]:
        await session.execute(delete(model))
    await session.commit()
    logger.info("Dropped all existing data")


async def _get_or_create(session: AsyncSession, model, lookup: dict, values: dict) -> tuple[object, bool]:
    existing = (await session.execute(select(model).filter_by(**lookup))).scalars().first()
    if existing is not None:
        return existing, False
    obj = model(**lookup, **values)
    session.add(obj)
    await session.flush()
    return obj, True


async def seed(academic_year: str, drop: bool = False) -> dict[str, int]:
    """Main seed function. Existing records are left alone; returns counts created."""
    counts = {"students": 0, "pickup_points": 0, "vehicles": 0, "routes": 0, "stops": 0, "fees": 0}

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        await _get_or_create(
            session,
            FeeTypeModel,
            {"name": TRANSPORT_FEE_TYPE_NAME},
            {"description": TRANSPORT_FEE_TYPE_DESCRIPTION, "category": TRANSPORT_FEE_TYPE_CATEGORY},
        )

        for data in STUDENTS:
            values = dict(data)
            _, created = await _get_or_create(
                session, StudentModel, {"admission_number": values.pop("admission_number")}, values
            )
            counts["students"] += created

        points: dict[str, PickupPointModel] = {}
        for data in PICKUP_POINTS:
            values = dict(data)
            point, created = await _get_or_create(
                session, PickupPointModel, {"name": values.pop("name")}, values
            )
            points[point.name] = point
            counts["pickup_points"] += created

        for data in VEHICLES:
            values = dict(data)
            _, created = await _get_or_create(
                session, VehicleModel, {"vehicle_number": values.pop("vehicle_number")}, values
            )
            counts["vehicles"] += created

        routes: dict[str, RouteModel] = {}
        for data in ROUTES:
            values = dict(data)
            route, created = await _get_or_create(
                session, RouteModel, {"route_code": values.pop("route_code")}, values
            )
            routes[route.route_code] = route
            counts["routes"] += created

        for code, point_name, order, eta in STOPS:
            _, created = await _get_or_create(
                session,
                RoutePickupPointModel,
                {"route_id": routes[code].id, "pickup_point_id": points[point_name].id},
                {"sequence_order": order, "estimated_time": eta},
            )
            counts["stops"] += created

        for code, (monthly_fee, description) in FEES.items():
            _, created = await _get_or_create(
                session,
                TransportFeeMasterModel,
                {"route_id": routes[code].id, "academic_year": academic_year, "is_active": True},
                {"monthly_fee": monthly_fee, "description": description},
            )
            counts["fees"] += created

        await session.commit()

    logger.info(
        "Seed complete for %s: %s",
        academic_year, ", ".join(f"{v} {k}" for k, v in counts.items()),
    )
    return counts


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        print(f"\n{'='*50}")
        print("SEED VERIFICATION")
        print(f"{'='*50}")
        for label, model in [
            ("Students", StudentModel),
            ("Pickup points", PickupPointModel),
            ("Vehicles", VehicleModel),
            ("Routes", RouteModel),
            ("Route stops", RoutePickupPointModel),
            ("Fee rates", TransportFeeMasterModel),
            ("Assignments", StudentTransportAssignmentModel),
        ]:
            total = (await session.execute(select(func.count()).select_from(model))).scalar_one()
            print(f"{label + ':':<15} {total}")
        print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the school transport database")
    parser.add_argument(
        "--academic-year", type=str, default=settings.current_academic_year,
        help="Academic year for the sample fee rates (default: CURRENT_ACADEMIC_YEAR)",
    )
    parser.add_argument(
        "--drop", action="store_true",
        help="Drop existing data before seeding",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    if args.verify_only:
        asyncio.run(_verify_data())
    else:
        async def run_all():
            await seed(args.academic_year, drop=args.drop)
            await _verify_data()
        asyncio.run(run_all())


if __name__ == "__main__":
    main()
