import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from app.api.schemas.appointment import ConfirmationEmailRequest, EmailSentResponse
from app.services.email_service import (
    EmailDeliveryError,
    build_appointment_confirmation_html,
    confirmation_subject,
    deliver_email,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/email", tags=["email"])


@router.post("/confirmation", response_model=EmailSentResponse)
async def send_confirmation_email(body: ConfirmationEmailRequest) -> EmailSentResponse:
    """Send a booking confirmation for details the frontend already has."""
    html = build_appointment_confirmation_html(
        recipient_name=body.name,
        date=body.date,
        time=body.time,
        services=[body.service],
    )
    try:
        sent = await run_in_threadpool(deliver_email, body.email, confirmation_subject(body.date, body.time), html)
    except EmailDeliveryError as e:
        logger.exception("Confirmation email failed: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send email") from e
    if not sent:
        return EmailSentResponse(success=False, message="Email delivery is not configured")
    return EmailSentResponse(success=True, message="Email sent")
