"""SQLAlchemy ORM models: maps to PostgreSQL tables."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base
from app.domain.policies.timestamps import utc_now


def _pk() -> Mapped[uuid.UUID]:
    return mapped_column(Uuid, primary_key=True, default=uuid.uuid4)


def _created_at() -> Mapped[datetime]:
    return mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )


class StudentModel(Base):
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = _pk()
    admission_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    class_name: Mapped[str] = mapped_column(String(50), nullable=False)
    section: Mapped[str | None] = mapped_column(String(20), nullable=True)
    roll_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    parent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    parent_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    transport_assignments: Mapped[list["StudentTransportAssignmentModel"]] = relationship(
        back_populates="student"
    )


class RouteModel(Base):
    __tablename__ = "routes"

    id: Mapped[uuid.UUID] = _pk()
    route_name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    route_code: Mapped[str | None] = mapped_column(String(50), unique=True, nullable=True)
    start_point: Mapped[str] = mapped_column(String(200), nullable=False)
    end_point: Mapped[str] = mapped_column(String(200), nullable=False)
    distance: Mapped[float | None] = mapped_column(Float, nullable=True)
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    pickup_points: Mapped[list["RoutePickupPointModel"]] = relationship(back_populates="route")
    vehicle_assignments: Mapped[list["RouteVehicleAssignmentModel"]] = relationship(
        back_populates="route"
    )
    student_assignments: Mapped[list["StudentTransportAssignmentModel"]] = relationship(
        back_populates="route"
    )
    transport_fees: Mapped[list["TransportFeeMasterModel"]] = relationship(
        back_populates="route"
    )


class PickupPointModel(Base):
    __tablename__ = "pickup_points"

    id: Mapped[uuid.UUID] = _pk()
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    landmark: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    routes: Mapped[list["RoutePickupPointModel"]] = relationship(back_populates="pickup_point")


class RoutePickupPointModel(Base):
    __tablename__ = "route_pickup_points"

    id: Mapped[uuid.UUID] = _pk()
    route_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("routes.id", ondelete="CASCADE"), nullable=False
    )
    pickup_point_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pickup_points.id"), nullable=False
    )
    sequence_order: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    distance_from_start: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = _created_at()

    route: Mapped["RouteModel"] = relationship(back_populates="pickup_points")
    pickup_point: Mapped["PickupPointModel"] = relationship(back_populates="routes")

    __table_args__ = (
        UniqueConstraint("route_id", "pickup_point_id", name="uq_route_pickup_point"),
        Index("idx_route_pickup_points_route", "route_id"),
    )


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = _pk()
    vehicle_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    vehicle_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    driver_name: Mapped[str] = mapped_column(String(200), nullable=False)
    driver_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    driver_license: Mapped[str | None] = mapped_column(String(50), nullable=True)
    helper_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    helper_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    registration_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    insurance_expiry: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    fitness_expiry: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    route_assignments: Mapped[list["RouteVehicleAssignmentModel"]] = relationship(
        back_populates="vehicle"
    )


class RouteVehicleAssignmentModel(Base):
    __tablename__ = "route_vehicle_assignments"

    id: Mapped[uuid.UUID] = _pk()
    route_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("routes.id"), nullable=False)
    vehicle_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("vehicles.id"), nullable=False)
    valid_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    valid_to: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    shift: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    route: Mapped["RouteModel"] = relationship(back_populates="vehicle_assignments")
    vehicle: Mapped["VehicleModel"] = relationship(back_populates="route_assignments")

    __table_args__ = (
        Index("idx_route_vehicle_route", "route_id"),
        Index("idx_route_vehicle_vehicle", "vehicle_id"),
    )


class TransportFeeMasterModel(Base):
    __tablename__ = "transport_fee_masters"

    id: Mapped[uuid.UUID] = _pk()
    route_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("routes.id"), nullable=True
    )
    zone_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    monthly_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    route: Mapped["RouteModel | None"] = relationship(back_populates="transport_fees")

    __table_args__ = (
        Index("idx_transport_fee_route_year", "route_id", "academic_year"),
    )


class StudentTransportAssignmentModel(Base):
    __tablename__ = "student_transport_assignments"

    id: Mapped[uuid.UUID] = _pk()
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id"), nullable=False)
    route_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("routes.id"), nullable=False)
    pickup_point_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pickup_points.id"), nullable=False
    )
    valid_from: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    valid_to: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    shift: Mapped[str | None] = mapped_column(String(20), nullable=True)
    monthly_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = _created_at()

    student: Mapped["StudentModel"] = relationship(back_populates="transport_assignments")
    route: Mapped["RouteModel"] = relationship(back_populates="student_assignments")
    pickup_point: Mapped["PickupPointModel"] = relationship()

    __table_args__ = (
        Index("idx_student_transport_route", "route_id"),
        Index("idx_student_transport_status", "status"),
        # At most one ACTIVE assignment per student, even under concurrent writes.
        Index(
            "uq_student_transport_one_active",
            "student_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )


class FeeTypeModel(Base):
    __tablename__ = "fee_types"

    id: Mapped[uuid.UUID] = _pk()
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = _created_at()


class FeeMasterModel(Base):
    __tablename__ = "fee_masters"

    id: Mapped[uuid.UUID] = _pk()
    fee_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("fee_types.id"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (Index("idx_fee_masters_type_year", "fee_type_id", "academic_year"),)


class StudentFeeAssignmentModel(Base):
    __tablename__ = "student_fee_assignments"

    id: Mapped[uuid.UUID] = _pk()
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id"), nullable=False)
    fee_master_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("fee_masters.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    created_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = _created_at()

    __table_args__ = (
        UniqueConstraint(
            "student_id", "fee_master_id", "month", "year", name="uq_student_fee_period"
        ),
    )
