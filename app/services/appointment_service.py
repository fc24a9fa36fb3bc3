import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.errors import AppointmentError, RejectionCode
from app.models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from app.models.common import validate_slot_date, validate_slot_time
from app.repositories.base import AppointmentStore
from app.services.slot_service import ConflictChecker

logger = logging.getLogger(__name__)


def _validation_message(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
    )


class AppointmentLifecycle:
    """Create, cancel and reschedule appointments.

    Status moves Booked -> Rescheduled | Cancelled, and Rescheduled -> Rescheduled | Cancelled.
    Cancelled records are not guarded: cancelling again or rescheduling them still
    goes through, only reschedule consults the ConflictChecker.
    """

    def __init__(self, appointments: AppointmentStore, checker: ConflictChecker) -> None:
        self.appointments = appointments
        self.checker = checker

    async def _ensure_slot(
        self, staff_id: int, date: str, time: str, exclude_id: int | None = None
    ) -> None:
        decision = await self.checker.check_slot_available(
            staff_id, date, time, exclude_appointment_id=exclude_id
        )
        if not decision.allowed:
            raise AppointmentError(decision.code)

    async def create_appointment(self, data: AppointmentCreate | dict[str, Any]) -> Appointment:
        if not isinstance(data, AppointmentCreate):
            try:
                data = AppointmentCreate.model_validate(data)
            except ValidationError as e:
                raise AppointmentError(RejectionCode.VALIDATION_ERROR, _validation_message(e)) from e
        # Unassigned bookings have no staff slot to collide with
        if data.staff_id is not None:
            await self._ensure_slot(data.staff_id, data.date, data.time)
        appointment = Appointment(
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            staff_id=data.staff_id,
            date=data.date,
            time=data.time,
            service_ids=list(data.service_ids),
            total_price=data.total_price,
            status=AppointmentStatus.BOOKED.value,
        )
        try:
            appointment = await self.appointments.insert(appointment)
        except IntegrityError as e:
            # customer_id is the only foreign key on appointments
            logger.info("Create appointment rejected by constraint: %s", e.orig)
            raise AppointmentError(
                RejectionCode.VALIDATION_ERROR, f"Unknown customer {data.customer_id}"
            ) from e
        except SQLAlchemyError as e:
            logger.exception("Create appointment failed: %s", e)
            raise AppointmentError(RejectionCode.STORE_ERROR) from e
        logger.info(
            "Appointment %s booked for customer %s on %s %s (staff %s)",
            appointment.id, appointment.customer_id, appointment.date, appointment.time, appointment.staff_id,
        )
        return appointment

    async def cancel_appointment(self, appointment_id: int, reason: str | None = None) -> Appointment:
        try:
            appointment = await self.appointments.update(
                appointment_id,
                status=AppointmentStatus.CANCELLED.value,
                cancel_reason=reason,
            )
        except SQLAlchemyError as e:
            logger.exception("Cancel appointment %s failed: %s", appointment_id, e)
            raise AppointmentError(RejectionCode.STORE_ERROR) from e
        if appointment is None:
            raise AppointmentError(RejectionCode.NOT_FOUND)
        logger.info("Appointment %s cancelled (%s)", appointment_id, reason or "no reason given")
        return appointment

    async def reschedule_appointment(self, appointment_id: int, date: str, time: str) -> Appointment:
        try:
            validate_slot_date(date)
            validate_slot_time(time)
        except ValueError as e:
            raise AppointmentError(RejectionCode.VALIDATION_ERROR, str(e)) from e
        try:
            current = await self.appointments.find_by_id(appointment_id)
        except SQLAlchemyError as e:
            logger.exception("Load appointment %s failed: %s", appointment_id, e)
            raise AppointmentError(RejectionCode.STORE_ERROR) from e
        if current is None:
            raise AppointmentError(RejectionCode.NOT_FOUND)
        if current.status == AppointmentStatus.CANCELLED.value:
            logger.warning("Rescheduling cancelled appointment %s", appointment_id)
        if current.staff_id is not None:
            await self._ensure_slot(current.staff_id, date, time, exclude_id=current.id)
        try:
            updated = await self.appointments.update(
                appointment_id,
                date=date,
                time=time,
                status=AppointmentStatus.RESCHEDULED.value,
            )
        except SQLAlchemyError as e:
            logger.exception("Reschedule appointment %s failed: %s", appointment_id, e)
            raise AppointmentError(RejectionCode.STORE_ERROR) from e
        # Removed between the check and the write
        if updated is None:
            raise AppointmentError(RejectionCode.NOT_FOUND)
        logger.info("Appointment %s rescheduled to %s %s", appointment_id, date, time)
        return updated
