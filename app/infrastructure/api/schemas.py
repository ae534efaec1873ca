"""Request bodies. JSON keys are camelCase; Python attributes stay snake_case."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.policies.timestamps import parse_lenient_timestamp
from app.domain.value_objects.enums import Shift


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def changes(self) -> dict[str, Any]:
        """Only the fields the client actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


# Unparseable dates become None instead of a validation error.
LenientDateTime = Annotated[datetime | None, BeforeValidator(parse_lenient_timestamp)]


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# Optional in an update body, but an explicit null is rejected.
NotNull = AfterValidator(_reject_null)


# ─── Students ────────────────────────────────────────────────────────


class StudentCreate(CamelModel):
    admission_number: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    class_name: str = Field(alias="class", min_length=1, max_length=50)
    section: str | None = None
    roll_number: str | None = None
    email: str | None = None
    phone: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None


class StudentUpdate(CamelModel):
    admission_number: Annotated[str | None, Field(min_length=1, max_length=50), NotNull] = None
    first_name: Annotated[str | None, Field(min_length=1, max_length=100), NotNull] = None
    last_name: Annotated[str | None, Field(min_length=1, max_length=100), NotNull] = None
    class_name: Annotated[
        str | None, Field(alias="class", min_length=1, max_length=50), NotNull
    ] = None
    section: str | None = None
    roll_number: str | None = None
    email: str | None = None
    phone: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    address: str | None = None


# ─── Routes ──────────────────────────────────────────────────────────


class RouteCreate(CamelModel):
    route_name: str = Field(min_length=1, max_length=200)
    route_code: str | None = Field(default=None, max_length=50)
    start_point: str = Field(min_length=1, max_length=200)
    end_point: str = Field(min_length=1, max_length=200)
    distance: float | None = Field(default=None, ge=0)
    estimated_duration: int | None = Field(default=None, ge=0)


class RouteUpdate(CamelModel):
    route_name: Annotated[str | None, Field(min_length=1, max_length=200), NotNull] = None
    route_code: str | None = Field(default=None, max_length=50)
    start_point: Annotated[str | None, Field(min_length=1, max_length=200), NotNull] = None
    end_point: Annotated[str | None, Field(min_length=1, max_length=200), NotNull] = None
    distance: float | None = Field(default=None, ge=0)
    estimated_duration: int | None = Field(default=None, ge=0)


# ─── Pickup points ───────────────────────────────────────────────────


class PickupPointCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    landmark: str | None = None


class PickupPointUpdate(CamelModel):
    name: Annotated[str | None, Field(min_length=1, max_length=200), NotNull] = None
    address: Annotated[str | None, Field(min_length=1), NotNull] = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    landmark: str | None = None


# ─── Vehicles ────────────────────────────────────────────────────────


class VehicleCreate(CamelModel):
    vehicle_number: str = Field(min_length=1, max_length=50)
    vehicle_type: str | None = None
    capacity: int | None = Field(default=None, gt=0)
    driver_name: str = Field(min_length=1, max_length=200)
    driver_phone: str = Field(min_length=1, max_length=30)
    driver_license: str | None = None
    helper_name: str | None = None
    helper_phone: str | None = None
    registration_number: str | None = None
    insurance_expiry: LenientDateTime = None
    fitness_expiry: LenientDateTime = None


class VehicleUpdate(CamelModel):
    vehicle_number: Annotated[str | None, Field(min_length=1, max_length=50), NotNull] = None
    vehicle_type: str | None = None
    capacity: int | None = Field(default=None, gt=0)
    driver_name: Annotated[str | None, Field(min_length=1, max_length=200), NotNull] = None
    driver_phone: Annotated[str | None, Field(min_length=1, max_length=30), NotNull] = None
    driver_license: str | None = None
    helper_name: str | None = None
    helper_phone: str | None = None
    registration_number: str | None = None
    insurance_expiry: LenientDateTime = None
    fitness_expiry: LenientDateTime = None


# ─── Fee masters ─────────────────────────────────────────────────────


class FeeMasterCreate(CamelModel):
    route_id: UUID | None = None
    zone_name: str | None = None
    monthly_fee: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: str | None = None
    academic_year: str = Field(min_length=1, max_length=20)


class FeeMasterUpdate(CamelModel):
    route_id: UUID | None = None
    zone_name: str | None = None
    monthly_fee: Annotated[
        Decimal | None, Field(gt=0, max_digits=10, decimal_places=2), NotNull
    ] = None
    description: str | None = None
    academic_year: Annotated[str | None, Field(min_length=1, max_length=20), NotNull] = None


# ─── Route associations ──────────────────────────────────────────────


class RoutePickupPointCreate(CamelModel):
    route_id: UUID
    pickup_point_id: UUID
    sequence_order: int = Field(ge=0)
    estimated_time: str | None = None
    distance_from_start: float | None = Field(default=None, ge=0)


class RoutePickupPointUpdate(CamelModel):
    sequence_order: Annotated[int | None, Field(ge=0), NotNull] = None
    estimated_time: str | None = None
    distance_from_start: float | None = Field(default=None, ge=0)


class RouteVehicleCreate(CamelModel):
    route_id: UUID
    vehicle_id: UUID
    valid_from: LenientDateTime = None
    valid_to: LenientDateTime = None
    shift: Shift | None = None


# ─── Student transport ───────────────────────────────────────────────


class StudentTransportAssign(CamelModel):
    student_id: UUID
    route_id: UUID
    pickup_point_id: UUID
    valid_from: LenientDateTime = None
    valid_to: LenientDateTime = None
    shift: Shift | None = None
    created_by: str | None = Field(default=None, max_length=100)


class StudentTransportUpdate(CamelModel):
    pickup_point_id: Annotated[UUID | None, NotNull] = None
    valid_to: LenientDateTime = None
    shift: Shift | None = None