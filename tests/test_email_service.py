import smtplib

import pytest

from app.core.config import settings
from app.services import email_service
from app.services.email_service import (
    EmailDeliveryError,
    build_appointment_confirmation_html,
    deliver_email,
    send_appointment_confirmation_email,
)


class _RefusingSMTP:
    def __init__(self, host, port):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture
def smtp_configured(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_user", "bookings")
    monkeypatch.setattr(settings, "smtp_password", "pw")
    monkeypatch.setattr(settings, "from_email", "bookings@nxlbeautybar.co.za")
    monkeypatch.setattr(email_service.smtplib, "SMTP", _RefusingSMTP)


def test_confirmation_html_lists_details():
    html = build_appointment_confirmation_html(
        recipient_name="Thandi <b>",
        date="2024-06-01",
        time="10:00 am",
        services=["Silk Press", "Trim"],
        stylist="Nomsa",
        duration_minutes=120,
        total_price=550.0,
    )

    assert "Thandi &lt;b&gt;" in html
    assert "Silk Press, Trim" in html
    assert "120 minutes" in html
    assert "R550" in html
    assert "Contact Number" not in html


def test_disabled_smtp_skips_send():
    assert deliver_email("thandi@example.com", "subject", "<p>hi</p>") is False


def test_smtp_failure_raises(smtp_configured):
    with pytest.raises(EmailDeliveryError):
        deliver_email("thandi@example.com", "subject", "<p>hi</p>")


def test_background_send_logs_failure(smtp_configured, caplog):
    send_appointment_confirmation_email(
        to_email="thandi@example.com",
        recipient_name="Thandi",
        date="2024-06-01",
        time="10:00 am",
        services=["Silk Press"],
    )

    assert "not delivered" in caplog.text
