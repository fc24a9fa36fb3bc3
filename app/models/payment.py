from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.common import utc_naive_now


class Payment(SQLModel, table=True):
    __tablename__ = "payments"
    id: int | None = Field(default=None, primary_key=True)
    appointment_id: int | None = Field(default=None, index=True)
    user_id: int | None = Field(default=None, index=True)
    amount: float
    method: str = "card"
    status: str = "paid"
    reference: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class PaymentCreate(SQLModel):
    appointment_id: int | None = None
    user_id: int | None = None
    amount: float = Field(ge=0)
    method: str = "card"
    status: str = "paid"
    reference: str | None = None


class PaymentPublic(SQLModel):
    id: int
    appointment_id: int | None = None
    user_id: int | None = None
    amount: float
    method: str
    status: str
    reference: str | None = None
    created_at: datetime
