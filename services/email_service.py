"""
Outbound email relay through the configured SMTP account.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

from fastapi import HTTPException

from schemas.email import EmailRequest
from services.config_service import get_smtp_settings

log = logging.getLogger(__name__)


def _recipients(value: Optional[Union[str, list[str]]]) -> list[str]:
    if not value:
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    return [item.strip() for item in items if item and item.strip()]


class EmailRelayService:

    @staticmethod
    def build_message(payload: EmailRequest, sender: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = str(payload.subject)
        msg["From"] = sender
        msg["To"] = ",".join(_recipients(payload.to))
        cc = _recipients(payload.cc)
        if cc:
            msg["Cc"] = ",".join(cc)
        msg.attach(MIMEText(str(payload.body), "html"))
        return msg

    @staticmethod
    def send_email(payload: EmailRequest) -> None:
        """Send one HTML mail. No retry: a failure surfaces as a 500."""
        to = _recipients(payload.to)
        if not to or not payload.subject or not payload.body:
            raise HTTPException(status_code=400, detail="Missing required fields: to, subject, or body")

        settings = get_smtp_settings()
        msg = EmailRelayService.build_message(payload, settings["sender"])
        all_recipients = to + _recipients(payload.cc)

        try:
            if int(settings["port"]) == 465:
                server = smtplib.SMTP_SSL(settings["host"], settings["port"], timeout=settings["timeout"])
            else:
                server = smtplib.SMTP(settings["host"], settings["port"], timeout=settings["timeout"])
            with server:
                if int(settings["port"]) != 465:
                    server.starttls()
                if settings["user"] and settings["password"]:
                    server.login(settings["user"], settings["password"])
                server.sendmail(settings["sender"], all_recipients, msg.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            log.error("Error sending email to %s: %s", to, exc)
            raise HTTPException(status_code=500, detail="Failed to send email")

        log.info("Email sent to %s (%s)", to, payload.subject)
