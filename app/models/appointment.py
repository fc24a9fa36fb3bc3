from datetime import datetime
from enum import Enum

from pydantic import field_validator
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now, validate_slot_date, validate_slot_time


class AppointmentStatus(str, Enum):
    BOOKED = "Booked"
    RESCHEDULED = "Rescheduled"
    CANCELLED = "Cancelled"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="users.id", index=True)
    customer_name: str | None = None
    # References employees.id; None means unassigned. No FK so staff removal never cascades.
    staff_id: int | None = Field(default=None, index=True)
    date: str = Field(index=True, max_length=10)  # YYYY-MM-DD
    time: str  # slot label, e.g. "09:00 am"
    service_ids: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    total_price: float = 0.0
    status: str = Field(default=AppointmentStatus.BOOKED.value, index=True)
    cancel_reason: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)


class AppointmentCreate(SQLModel):
    customer_id: int
    customer_name: str | None = None
    staff_id: int | None = None
    date: str
    time: str
    service_ids: list[int] = Field(default_factory=list)
    total_price: float = Field(default=0.0, ge=0)

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        return validate_slot_date(v)

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return validate_slot_time(v)


class AppointmentPublic(SQLModel):
    id: int
    customer_id: int
    customer_name: str | None = None
    staff_id: int | None = None
    date: str
    time: str
    service_ids: list[int]
    total_price: float
    status: AppointmentStatus
    cancel_reason: str | None = None
    created_at: datetime
    updated_at: datetime
