"""
SOB notification sent to the externally hosted notification endpoint.
"""
import logging

import requests
from sqlalchemy.orm import Session

from models.booking import BookingFieldsMixin
from schemas.booking import NotificationResult
from schemas.email import SobNotification
from services.config_service import get_sob_notification_timeout, get_sob_notification_url
from services.formatting import format_sob_date, fpod_display, reference_name
from services.master_data_service import MasterDataService

log = logging.getLogger(__name__)


def _join_emails(value) -> str:
    if not value:
        return ""
    if isinstance(value, list):
        return ",".join(str(item).strip() for item in value if str(item).strip())
    return str(value).strip()


class NotificationService:

    @staticmethod
    def customer_contacts(entry: BookingFieldsMixin, db: Session) -> tuple[str, str]:
        """Customer and sales-person emails from the embedded reference, else from master data."""
        customer = entry.customer
        record = customer if isinstance(customer, dict) else None
        if record is None or not (record.get("customerEmail") or record.get("salesPersonEmail")):
            record = MasterDataService.find_record("customer", reference_name(customer), db) or record or {}
        return _join_emails(record.get("customerEmail")), _join_emails(record.get("salesPersonEmail"))

    @staticmethod
    def build_sob_payload(entry: BookingFieldsMixin, db: Session) -> SobNotification:
        customer_email, sales_person_email = NotificationService.customer_contacts(entry, db)
        return SobNotification(
            customer_email=customer_email,
            sales_person_email=sales_person_email,
            customer_name=reference_name(entry.customer),
            booking_no=str(entry.booking_no or ""),
            sob_date=format_sob_date(entry.sob_date),
            vessel=reference_name(entry.vessel),
            voyage=str(entry.voyage or ""),
            pol=reference_name(entry.pol),
            pod=reference_name(entry.pod),
            fpod=fpod_display(entry.fpod),
            container_no=str(entry.container_no or ""),
            volume=str(entry.volume or ""),
            bl_no=str(entry.bl_no or ""),
        )

    @staticmethod
    def send_sob_notification(entry: BookingFieldsMixin, db: Session) -> NotificationResult:
        """Best effort, single attempt. The outcome is reported, never raised."""
        url = get_sob_notification_url()
        if not url:
            return NotificationResult(sent=False, detail="SOB notification endpoint is not configured")

        payload = NotificationService.build_sob_payload(entry, db)
        if not payload.customer_email and not payload.sales_person_email:
            return NotificationResult(sent=False, detail="No customer or sales person email on record")

        try:
            res = requests.post(url, json=payload.model_dump(), timeout=get_sob_notification_timeout())
            res.raise_for_status()
        except requests.RequestException as exc:
            log.error("SOB notification for %s failed: %s", entry.booking_no, exc)
            return NotificationResult(sent=False, detail=f"Failed to send SOB notification: {exc}")

        log.info("SOB notification sent for %s", entry.booking_no)
        return NotificationResult(sent=True, detail="SOB notification sent")
