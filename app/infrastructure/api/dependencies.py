"""FastAPI dependency injection: wires adapters into services and use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import (
    SqlBillingRepository,
    SqlPickupPointRepository,
    SqlRoutePickupPointRepository,
    SqlRouteRepository,
    SqlRouteVehicleRepository,
    SqlStudentRepository,
    SqlTransportAssignmentRepository,
    SqlTransportFeeRepository,
    SqlVehicleRepository,
)
from app.adapters.persistence.unit_of_work import SqlUnitOfWork
from app.application.services.fee_master_service import FeeMasterService
from app.application.services.pickup_point_service import PickupPointService
from app.application.services.route_pickup_point_service import RoutePickupPointService
from app.application.services.route_service import RouteService
from app.application.services.route_vehicle_service import RouteVehicleService
from app.application.services.student_service import StudentService
from app.application.services.student_transport_service import StudentTransportService
from app.application.services.vehicle_service import VehicleService
from app.application.use_cases.assign_student_transport import AssignStudentTransportUseCase
from app.config import settings


def get_academic_year() -> str:
    return settings.current_academic_year


def get_student_service(session: AsyncSession = Depends(get_session)) -> StudentService:
    return StudentService(
        student_repo=SqlStudentRepository(session),
        assignment_repo=SqlTransportAssignmentRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_route_service(session: AsyncSession = Depends(get_session)) -> RouteService:
    return RouteService(
        route_repo=SqlRouteRepository(session),
        stop_repo=SqlRoutePickupPointRepository(session),
        route_vehicle_repo=SqlRouteVehicleRepository(session),
        fee_repo=SqlTransportFeeRepository(session),
        assignment_repo=SqlTransportAssignmentRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_vehicle_service(session: AsyncSession = Depends(get_session)) -> VehicleService:
    return VehicleService(
        vehicle_repo=SqlVehicleRepository(session),
        route_vehicle_repo=SqlRouteVehicleRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_pickup_point_service(session: AsyncSession = Depends(get_session)) -> PickupPointService:
    return PickupPointService(
        pickup_point_repo=SqlPickupPointRepository(session),
        stop_repo=SqlRoutePickupPointRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_fee_master_service(session: AsyncSession = Depends(get_session)) -> FeeMasterService:
    return FeeMasterService(
        fee_repo=SqlTransportFeeRepository(session),
        route_repo=SqlRouteRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_route_pickup_point_service(
    session: AsyncSession = Depends(get_session),
) -> RoutePickupPointService:
    return RoutePickupPointService(
        route_repo=SqlRouteRepository(session),
        pickup_point_repo=SqlPickupPointRepository(session),
        stop_repo=SqlRoutePickupPointRepository(session),
        assignment_repo=SqlTransportAssignmentRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_route_vehicle_service(
    session: AsyncSession = Depends(get_session),
) -> RouteVehicleService:
    return RouteVehicleService(
        route_repo=SqlRouteRepository(session),
        vehicle_repo=SqlVehicleRepository(session),
        route_vehicle_repo=SqlRouteVehicleRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_student_transport_service(
    session: AsyncSession = Depends(get_session),
) -> StudentTransportService:
    return StudentTransportService(
        assignment_repo=SqlTransportAssignmentRepository(session),
        uow=SqlUnitOfWork(session),
    )


def get_assign_student_transport_uc(
    session: AsyncSession = Depends(get_session),
) -> AssignStudentTransportUseCase:
    return AssignStudentTransportUseCase(
        student_repo=SqlStudentRepository(session),
        route_repo=SqlRouteRepository(session),
        stop_repo=SqlRoutePickupPointRepository(session),
        assignment_repo=SqlTransportAssignmentRepository(session),
        fee_repo=SqlTransportFeeRepository(session),
        billing_repo=SqlBillingRepository(session),
        uow=SqlUnitOfWork(session),
    )
