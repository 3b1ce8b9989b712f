from fastapi import APIRouter, Depends

from core.security import get_current_user
from models.user import User
from schemas.email import EmailRequest
from services.email_service import EmailRelayService

router = APIRouter(prefix="/email", tags=["email"])


@router.post("/send")
def send_email(
    payload: EmailRequest,
    current_user: User = Depends(get_current_user),
):
    EmailRelayService.send_email(payload)
    return {"message": "Email sent successfully"}
