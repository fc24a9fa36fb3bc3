import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_admin_user,
    get_appointment_lifecycle,
    get_appointment_repository,
    get_current_user,
)
from app.api.schemas.appointment import (
    BookAppointmentRequest,
    CancelAppointmentRequest,
    RescheduleAppointmentRequest,
)
from app.core.db import get_session
from app.core.errors import AppointmentError, RejectionCode
from app.core.security import is_admin_email
from app.models.appointment import Appointment, AppointmentPublic
from app.models.user import User
from app.repositories.appointments import AppointmentRepository
from app.repositories.catalog import UserRepository
from app.services.appointment_service import AppointmentLifecycle
from app.services.catalog_service import get_employee, get_services_by_ids
from app.services.email_service import send_appointment_confirmation_email

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

_STATUS_FOR_CODE = {
    RejectionCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    RejectionCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionCode.SLOT_BLOCKED: status.HTTP_409_CONFLICT,
    RejectionCode.SLOT_TAKEN: status.HTTP_409_CONFLICT,
    RejectionCode.STORE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _to_http_exception(e: AppointmentError) -> HTTPException:
    headers = {"Retry-After": "1"} if e.retryable else None
    return HTTPException(status_code=_STATUS_FOR_CODE[e.code], detail=e.to_detail(), headers=headers)


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic.model_validate(a, from_attributes=True)


async def _ensure_may_modify(
    appointments: AppointmentRepository, appointment_id: int, user: User
) -> None:
    """Customers may only change their own bookings; missing ids fall through to the lifecycle."""
    existing = await appointments.find_by_id(appointment_id)
    if existing and existing.customer_id != user.id and not is_admin_email(user.email):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to modify this appointment",
        )


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    fields = body.model_dump()
    customer = current_user
    if fields["customer_id"] is not None and is_admin_email(current_user.email):
        customer = await UserRepository(session).get_by_id(fields["customer_id"])
        if customer is None:
            raise _to_http_exception(
                AppointmentError(RejectionCode.VALIDATION_ERROR, f"Unknown customer {fields['customer_id']}")
            )
    fields["customer_id"] = customer.id
    fields["customer_name"] = body.customer_name or customer.full_name
    try:
        appointment = await lifecycle.create_appointment(fields)
    except AppointmentError as e:
        raise _to_http_exception(e) from e
    logger.info("Appointment %s booked by user %s", appointment.id, current_user.id)

    services = await get_services_by_ids(session, appointment.service_ids)
    stylist = await get_employee(session, appointment.staff_id) if appointment.staff_id else None
    # Send confirmation email in background (uses sync SMTP)
    background_tasks.add_task(
        send_appointment_confirmation_email,
        to_email=customer.email,
        recipient_name=appointment.customer_name,
        date=appointment.date,
        time=appointment.time,
        services=[s.name for s in services],
        stylist=stylist.name if stylist else None,
        duration_minutes=sum(s.duration_minutes for s in services) or None,
        total_price=appointment.total_price,
        contact_number=customer.phone,
    )
    return _to_public(appointment)


@router.get("", response_model=list[AppointmentPublic])
async def list_appointments(
    date: str | None = Query(None),
    staff_id: int | None = Query(None),
    appointments: AppointmentRepository = Depends(get_appointment_repository),
) -> list[AppointmentPublic]:
    rows = await appointments.find_all(date=date, staff_id=staff_id)
    return [_to_public(a) for a in rows]


@router.get("/{appointment_id}", response_model=AppointmentPublic)
async def get_appointment(
    appointment_id: int,
    appointments: AppointmentRepository = Depends(get_appointment_repository),
) -> AppointmentPublic:
    appointment = await appointments.find_by_id(appointment_id)
    if not appointment:
        raise _to_http_exception(AppointmentError(RejectionCode.NOT_FOUND))
    return _to_public(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentPublic)
async def cancel_appointment(
    appointment_id: int,
    body: CancelAppointmentRequest | None = None,
    appointments: AppointmentRepository = Depends(get_appointment_repository),
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    await _ensure_may_modify(appointments, appointment_id, current_user)
    try:
        appointment = await lifecycle.cancel_appointment(appointment_id, body.reason if body else None)
    except AppointmentError as e:
        raise _to_http_exception(e) from e
    return _to_public(appointment)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentPublic)
async def reschedule_appointment(
    appointment_id: int,
    body: RescheduleAppointmentRequest,
    appointments: AppointmentRepository = Depends(get_appointment_repository),
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    await _ensure_may_modify(appointments, appointment_id, current_user)
    try:
        appointment = await lifecycle.reschedule_appointment(appointment_id, body.date, body.time)
    except AppointmentError as e:
        raise _to_http_exception(e) from e
    return _to_public(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    appointments: AppointmentRepository = Depends(get_appointment_repository),
    _admin: User = Depends(get_admin_user),
) -> None:
    """Administrative hard delete, regardless of status."""
    if not await appointments.delete(appointment_id):
        raise _to_http_exception(AppointmentError(RejectionCode.NOT_FOUND))
