"""SMTP Mailer — delivers HTML emails with per-project SMTP credentials.

Invariants:
    - secure=True → implicit TLS (SMTP_SSL); otherwise STARTTLS when the server offers it
    - Login only when a user is configured
    - smtplib runs in a worker thread; every smtplib/socket failure → ExternalServiceError("smtp")
"""

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage

from photobooth.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    secure: bool = False
    user: str | None = None
    password: str | None = None
    timeout: int = 30


class SmtpMailer:
    async def send_html(
        self, smtp: SmtpSettings, sender: str, recipient: str, subject: str, html: str,
    ) -> None:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content("Votre photo est disponible : ouvrez ce message en HTML.")
        message.add_alternative(html, subtype="html")
        try:
            await asyncio.to_thread(self._deliver, smtp, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {smtp.host} failed: {e}", extra={"provider": "smtp"})
            raise ExternalServiceError("Email could not be delivered", "smtp", "delivery_failed")
        logger.info("Email delivered", extra={"provider": "smtp"})

    def _deliver(self, smtp: SmtpSettings, message: EmailMessage) -> None:
        context = ssl.create_default_context()
        if smtp.secure:
            server = smtplib.SMTP_SSL(smtp.host, smtp.port, timeout=smtp.timeout, context=context)
        else:
            server = smtplib.SMTP(smtp.host, smtp.port, timeout=smtp.timeout)
        with server:
            if not smtp.secure:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls(context=context)
                    server.ehlo()
            if smtp.user:
                server.login(smtp.user, smtp.password or "")
            server.send_message(message)
