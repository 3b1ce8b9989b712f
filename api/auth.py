from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import ACCESS_TOKEN_COOKIE, get_current_user
from models.user import User
from services.auth_service import AuthService
from services.config_service import get_access_token_expire_minutes
from schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login")
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Authenticate user and return access token."""
    user = AuthService.authenticate_user(form_data.username, form_data.password, db)
    user = AuthService.mark_signed_in(user, db)
    access_token = AuthService.create_access_token(
        data={"sub": str(user.id), "role": user.role}
    )

    response = JSONResponse(content={
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role,
        "user": user.username,
        "permissions": list(user.permissions or []),
    })

    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        max_age=get_access_token_expire_minutes() * 60,
        httponly=True,
        samesite="lax",
        secure=False  # Set to True if running over HTTPS in production
    )

    return response


@router.post("/logout")
def logout(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark the user as signed out and drop the session cookie."""
    AuthService.mark_signed_out(current_user, db)
    response = JSONResponse(content={"message": "Signed out"})
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return response


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user profile."""
    return current_user
