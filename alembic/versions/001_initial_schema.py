"""Initial schema: transport and billing tables.

Revision ID: 001
Revises: None
Create Date: 2024-07-01
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid, primary_key=True)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )


def _is_active() -> sa.Column:
    return sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true())


def upgrade() -> None:
    # Students
    op.create_table(
        "students",
        _id(),
        sa.Column("admission_number", sa.String(50), unique=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("class_name", sa.String(50), nullable=False),
        sa.Column("section", sa.String(20), nullable=True),
        sa.Column("roll_number", sa.String(20), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("parent_name", sa.String(200), nullable=True),
        sa.Column("parent_phone", sa.String(30), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        _is_active(),
        _created_at(),
    )

    # Routes
    op.create_table(
        "routes",
        _id(),
        sa.Column("route_name", sa.String(200), unique=True, nullable=False),
        sa.Column("route_code", sa.String(50), unique=True, nullable=True),
        sa.Column("start_point", sa.String(200), nullable=False),
        sa.Column("end_point", sa.String(200), nullable=False),
        sa.Column("distance", sa.Float, nullable=True),
        sa.Column("estimated_duration", sa.Integer, nullable=True),
        _is_active(),
        _created_at(),
    )

    # Pickup points
    op.create_table(
        "pickup_points",
        _id(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("landmark", sa.String(200), nullable=True),
        _is_active(),
        _created_at(),
    )

    # Route stops
    op.create_table(
        "route_pickup_points",
        _id(),
        sa.Column(
            "route_id", sa.Uuid, sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("pickup_point_id", sa.Uuid, sa.ForeignKey("pickup_points.id"), nullable=False),
        sa.Column("sequence_order", sa.Integer, nullable=False),
        sa.Column("estimated_time", sa.String(20), nullable=True),
        sa.Column("distance_from_start", sa.Float, nullable=True),
        _created_at(),
        sa.UniqueConstraint("route_id", "pickup_point_id", name="uq_route_pickup_point"),
    )
    op.create_index("idx_route_pickup_points_route", "route_pickup_points", ["route_id"])

    # Vehicles
    op.create_table(
        "vehicles",
        _id(),
        sa.Column("vehicle_number", sa.String(50), unique=True, nullable=False),
        sa.Column("vehicle_type", sa.String(50), nullable=True),
        sa.Column("capacity", sa.Integer, nullable=True),
        sa.Column("driver_name", sa.String(200), nullable=False),
        sa.Column("driver_phone", sa.String(30), nullable=False),
        sa.Column("driver_license", sa.String(50), nullable=True),
        sa.Column("helper_name", sa.String(200), nullable=True),
        sa.Column("helper_phone", sa.String(30), nullable=True),
        sa.Column("registration_number", sa.String(50), nullable=True),
        sa.Column("insurance_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fitness_expiry", sa.DateTime(timezone=True), nullable=True),
        _is_active(),
        _created_at(),
    )

    # Route ↔ vehicle
    op.create_table(
        "route_vehicle_assignments",
        _id(),
        sa.Column("route_id", sa.Uuid, sa.ForeignKey("routes.id"), nullable=False),
        sa.Column("vehicle_id", sa.Uuid, sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_to", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shift", sa.String(20), nullable=True),
        _is_active(),
        _created_at(),
    )
    op.create_index("idx_route_vehicle_route", "route_vehicle_assignments", ["route_id"])
    op.create_index("idx_route_vehicle_vehicle", "route_vehicle_assignments", ["vehicle_id"])

    # Transport fee rates
    op.create_table(
        "transport_fee_masters",
        _id(),
        sa.Column("route_id", sa.Uuid, sa.ForeignKey("routes.id"), nullable=True),
        sa.Column("zone_name", sa.String(100), nullable=True),
        sa.Column("monthly_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("academic_year", sa.String(20), nullable=False),
        _is_active(),
        _created_at(),
    )
    op.create_index(
        "idx_transport_fee_route_year", "transport_fee_masters", ["route_id", "academic_year"]
    )

    # Student ↔ route assignments
    op.create_table(
        "student_transport_assignments",
        _id(),
        sa.Column("student_id", sa.Uuid, sa.ForeignKey("students.id"), nullable=False),
        sa.Column("route_id", sa.Uuid, sa.ForeignKey("routes.id"), nullable=False),
        sa.Column("pickup_point_id", sa.Uuid, sa.ForeignKey("pickup_points.id"), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("valid_to", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shift", sa.String(20), nullable=True),
        sa.Column("monthly_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_by", sa.String(100), nullable=True),
        _created_at(),
    )
    op.create_index(
        "idx_student_transport_route", "student_transport_assignments", ["route_id"]
    )
    op.create_index(
        "idx_student_transport_status", "student_transport_assignments", ["status"]
    )
    op.create_index(
        "uq_student_transport_one_active",
        "student_transport_assignments",
        ["student_id"],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )

    # Billing
    op.create_table(
        "fee_types",
        _id(),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(50), nullable=True),
        _created_at(),
    )
    op.create_table(
        "fee_masters",
        _id(),
        sa.Column("fee_type_id", sa.Uuid, sa.ForeignKey("fee_types.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("academic_year", sa.String(20), nullable=False),
        _is_active(),
        _created_at(),
    )
    op.create_index("idx_fee_masters_type_year", "fee_masters", ["fee_type_id", "academic_year"])
    op.create_table(
        "student_fee_assignments",
        _id(),
        sa.Column("student_id", sa.Uuid, sa.ForeignKey("students.id"), nullable=False),
        sa.Column("fee_master_id", sa.Uuid, sa.ForeignKey("fee_masters.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("month", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("created_by", sa.String(100), nullable=True),
        _created_at(),
        sa.UniqueConstraint(
            "student_id", "fee_master_id", "month", "year", name="uq_student_fee_period"
        ),
    )


def downgrade() -> None:
    op.drop_table("student_fee_assignments")
    op.drop_table("fee_masters")
    op.drop_table("fee_types")
    op.drop_table("student_transport_assignments")
    op.drop_table("transport_fee_masters")
    op.drop_table("route_vehicle_assignments")
    op.drop_table("vehicles")
    op.drop_table("route_pickup_points")
    op.drop_table("pickup_points")
    op.drop_table("routes")
    op.drop_table("students")
