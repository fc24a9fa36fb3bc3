from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now


class EmployeeBase(SQLModel):
    name: str
    email: str = Field(unique=True, index=True)
    phone: str | None = None
    role: str = "Stylist"


class Employee(EmployeeBase, table=True):
    __tablename__ = "employees"
    id: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_naive_now)


class EmployeeCreate(EmployeeBase):
    pass


class EmployeePublic(EmployeeBase):
    id: int
    created_at: datetime
