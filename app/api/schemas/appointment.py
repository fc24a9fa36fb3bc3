from pydantic import BaseModel, EmailStr, Field


class BookAppointmentRequest(BaseModel):
    # Admins may book on behalf of a customer; everyone else books for themselves
    customer_id: int | None = None
    customer_name: str | None = None
    staff_id: int | None = None
    date: str  # YYYY-MM-DD
    time: str  # slot label, e.g. "09:00 am"
    service_ids: list[int] = Field(default_factory=list)
    total_price: float = 0.0


class CancelAppointmentRequest(BaseModel):
    reason: str | None = None


class RescheduleAppointmentRequest(BaseModel):
    date: str
    time: str


class ConfirmationEmailRequest(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    service: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)


class EmailSentResponse(BaseModel):
    success: bool
    message: str
