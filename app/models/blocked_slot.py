from datetime import datetime

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now, validate_slot_date, validate_slot_time


class BlockedSlot(SQLModel, table=True):
    """A (date, time, staff) slot an administrator marked as unavailable."""

    __tablename__ = "blocked_slots"
    id: int | None = Field(default=None, primary_key=True)
    date: str = Field(index=True, max_length=10)
    time: str
    staff_id: int = Field(index=True)
    reason: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class BlockedSlotCreate(SQLModel):
    date: str
    time: str
    staff_id: int
    reason: str | None = None

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        return validate_slot_date(v)

    @field_validator("time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        return validate_slot_time(v)


class BlockedSlotPublic(SQLModel):
    id: int
    date: str
    time: str
    staff_id: int
    reason: str | None = None
    created_at: datetime
