"""SMTP Mailer — failures keep server details out of the error message."""

import smtplib

import pytest

from photobooth.core.errors import ExternalServiceError
from photobooth.infrastructure.mailer import SmtpMailer, SmtpSettings


@pytest.mark.parametrize("failure", [
    ConnectionRefusedError("smtp.internal.lan:2525 refused"),
    smtplib.SMTPAuthenticationError(535, b"bad password for studio@smtp.internal.lan"),
])
async def test_delivery_failure_message_is_generic(monkeypatch, failure):
    def deliver(self, smtp, message):
        raise failure

    monkeypatch.setattr(SmtpMailer, "_deliver", deliver)

    with pytest.raises(ExternalServiceError) as exc:
        await SmtpMailer().send_html(
            SmtpSettings(host="smtp.internal.lan"), "studio@example.com",
            "guest@example.com", "Votre photo", "<p>hi</p>",
        )
    assert exc.value.provider == "smtp"
    assert exc.value.error_type == "delivery_failed"
    assert "internal.lan" not in exc.value.message
