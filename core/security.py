"""
Resolve the signed-in desk user for a request.

The token comes from the ``Authorization: Bearer`` header (API clients)
or from the ``access_token`` cookie set at login (browser sessions).
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.database import get_db
from models.user import User
from services.auth_service import AuthService

ACCESS_TOKEN_COOKIE = "access_token"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _request_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    return bearer or request.cookies.get(ACCESS_TOKEN_COOKIE)


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    resolved = _request_token(request, token)
    if not resolved:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthService.get_user_from_token(resolved, db)
