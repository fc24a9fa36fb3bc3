from datetime import datetime

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now


class Service(SQLModel, table=True):
    """A salon treatment offered for booking (not a Python service class)."""

    __tablename__ = "services"
    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""
    price: float
    duration_minutes: int
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)


class ServiceCreate(SQLModel):
    name: str = Field(min_length=1)
    description: str = ""
    price: float = Field(gt=0)
    duration_minutes: int | None = Field(default=None, gt=0)
    # Older admin clients send "duration"; duration_minutes wins when both are present
    duration: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _resolve_duration(self) -> "ServiceCreate":
        if self.duration_minutes is None:
            self.duration_minutes = self.duration
        if self.duration_minutes is None:
            raise ValueError("Missing required fields: name, price, duration (in minutes)")
        return self


class ServiceUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    duration_minutes: int | None = Field(default=None, gt=0)
    duration: int | None = Field(default=None, gt=0)

    @field_validator("name", "description", "price", "duration_minutes", "duration")
    @classmethod
    def _not_null(cls, v):
        # Omit a field to leave it unchanged; the columns are NOT NULL
        if v is None:
            raise ValueError("may not be null")
        return v

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True, exclude={"duration"})
        if "duration_minutes" not in data and self.duration is not None:
            data["duration_minutes"] = self.duration
        return data


class ServicePublic(SQLModel):
    id: int
    name: str
    description: str
    price: float
    duration_minutes: int
    created_at: datetime
    updated_at: datetime
