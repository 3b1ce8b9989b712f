from typing import Optional, Union

from pydantic import BaseModel


class EmailRequest(BaseModel):
    # Validated by the relay so a missing field maps to a 400, not a 422
    to: Optional[Union[str, list[str]]] = None
    cc: Optional[Union[str, list[str]]] = None
    subject: Optional[str] = None
    body: Optional[str] = None


class SobNotification(BaseModel):
    customer_email: str
    sales_person_email: str
    customer_name: str
    booking_no: str
    sob_date: str
    vessel: str
    voyage: str
    pol: str
    pod: str
    fpod: str
    container_no: str
    volume: str
    bl_no: str
