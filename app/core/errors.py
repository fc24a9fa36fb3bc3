from enum import Enum


class RejectionCode(str, Enum):
    """Distinct failure codes surfaced by the booking core."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SLOT_BLOCKED = "SLOT_BLOCKED"
    SLOT_TAKEN = "SLOT_TAKEN"
    STORE_ERROR = "STORE_ERROR"


_DEFAULT_MESSAGES = {
    RejectionCode.VALIDATION_ERROR: "Invalid appointment data",
    RejectionCode.NOT_FOUND: "Appointment not found",
    RejectionCode.SLOT_BLOCKED: "The stylist is unavailable at this date and time",
    RejectionCode.SLOT_TAKEN: "The stylist already has an appointment at this date and time",
    RejectionCode.STORE_ERROR: "Booking store unavailable, please retry",
}


class AppointmentError(Exception):
    def __init__(self, code: RejectionCode, message: str | None = None) -> None:
        self.code = code
        self.message = message or _DEFAULT_MESSAGES[code]
        super().__init__(f"{code.value}: {self.message}")

    @property
    def retryable(self) -> bool:
        return self.code is RejectionCode.STORE_ERROR

    def to_detail(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}
