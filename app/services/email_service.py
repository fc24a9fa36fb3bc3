import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


def deliver_email(to_email: str, subject: str, html_body: str) -> bool:
    """Send email via SMTP (blocking). False when SMTP is not configured.

    Raises EmailDeliveryError when the SMTP exchange fails.
    """
    if not settings.email_enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return False
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.from_name} <{settings.from_email}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.sendmail(settings.from_email, [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(f"Failed to send email to {to_email}: {e}") from e
    logger.info("Email sent to %s", to_email)
    return True


def _html_escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def confirmation_subject(date: str, time: str) -> str:
    return f"Appointment Confirmed - {date} {time}"


def _detail_row(label: str, value: str, highlight: bool = False) -> str:
    colour = "#c68d8d" if highlight else "#666666"
    weight = "700" if highlight else "400"
    return f"""
                    <tr>
                      <td style="padding:8px 0;border-bottom:1px solid #eeeeee;font-weight:700;color:#333333;">{label}</td>
                      <td style="padding:8px 0;border-bottom:1px solid #eeeeee;text-align:right;font-weight:{weight};color:{colour};">{_html_escape(value)}</td>
                    </tr>"""


def build_appointment_confirmation_html(
    recipient_name: str,
    date: str,
    time: str,
    services: list[str],
    stylist: str | None = None,
    duration_minutes: int | None = None,
    total_price: float | None = None,
    contact_number: str | None = None,
) -> str:
    """Build HTML body for appointment confirmation."""
    rows = [
        _detail_row("Date:", date),
        _detail_row("Time:", time),
        _detail_row("Services:", ", ".join(services) if services else "-"),
    ]
    if stylist:
        rows.append(_detail_row("Stylist:", stylist))
    if duration_minutes:
        rows.append(_detail_row("Duration:", f"{duration_minutes} minutes"))
    if contact_number:
        rows.append(_detail_row("Contact Number:", contact_number))
    if total_price is not None:
        rows.append(_detail_row("Total Paid:", f"{settings.currency_symbol}{total_price:g}", highlight=True))
    details = "".join(rows)
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Appointment Confirmation</title>
</head>
<body style="margin:0;padding:20px;font-family:Arial,sans-serif;background-color:#f5f5f5;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:600px;margin:0 auto;background:#ffffff;border-radius:8px;overflow:hidden;">
    <tr>
      <td style="padding:30px;text-align:center;color:#ffffff;background:linear-gradient(135deg,#c68d8d,#f30707);">
        <p style="margin:0 0 10px 0;font-size:24px;font-weight:700;">{settings.site_name}</p>
        <h1 style="margin:0;">Appointment Confirmed!</h1>
      </td>
    </tr>
    <tr>
      <td style="padding:30px;">
        <p>Dear {_html_escape(recipient_name or 'there')},</p>
        <p>Thank you for booking with {settings.site_name}! Your appointment has been confirmed.</p>
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background:#f9f9f9;border-radius:8px;padding:20px;margin:20px 0;">
          <tr><td colspan="2"><h3 style="margin-top:0;color:#c68d8d;">Appointment Details</h3></td></tr>{details}
        </table>
        <h3 style="color:#c68d8d;">Important Information:</h3>
        <ul>
          <li>Please arrive 10 minutes before your appointment time</li>
          <li>The {settings.currency_symbol}{settings.booking_fee} booking fee is non-refundable</li>
          <li>To reschedule or cancel, please contact us at least 24 hours in advance</li>
        </ul>
        <p><strong>Need to make changes?</strong> Contact us:<br>
          Email: {settings.contact_email}<br>
          Phone: {settings.contact_phone}</p>
      </td>
    </tr>
    <tr>
      <td style="padding:20px;text-align:center;color:#666666;font-size:14px;background:#f8f8f8;">
        <p>Thank you for choosing {settings.site_name}!</p>
        <p>Visit us at: {settings.contact_address}</p>
        <p>This is an automated confirmation email. Please do not reply to this email.</p>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def send_appointment_confirmation_email(
    to_email: str,
    recipient_name: str | None,
    date: str,
    time: str,
    services: list[str],
    stylist: str | None = None,
    duration_minutes: int | None = None,
    total_price: float | None = None,
    contact_number: str | None = None,
) -> None:
    """Compose and send appointment confirmation (call from background task)."""
    html = build_appointment_confirmation_html(
        recipient_name=recipient_name or "",
        date=date,
        time=time,
        services=services,
        stylist=stylist,
        duration_minutes=duration_minutes,
        total_price=total_price,
        contact_number=contact_number,
    )
    try:
        deliver_email(to_email, confirmation_subject(date, time), html)
    except EmailDeliveryError as e:
        logger.exception("Confirmation email for %s %s not delivered: %s", date, time, e)
