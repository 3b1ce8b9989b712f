import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from models.user import ALL_PERMISSIONS, User
from schemas.user import UserCreate, UserUpdate
from services.config_service import (
    get_access_token_expire_minutes,
    get_default_admin_credentials,
    get_secret_key,
)

log = logging.getLogger(__name__)

ALGORITHM = "HS256"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12
)


class AuthService:
    """Service layer for authentication and user administration."""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def get_password_hash(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=get_access_token_expire_minutes())
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, get_secret_key(), algorithm=ALGORITHM)

    @staticmethod
    def verify_token(token: str) -> dict:
        """Verify JWT token and return payload."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
        except JWTError:
            raise credentials_exception
        if payload.get("sub") is None:
            raise credentials_exception
        return payload

    @staticmethod
    def normalize_permissions(role: str, permissions: Optional[list[str]]) -> list[str]:
        if role == "admin":
            return list(ALL_PERMISSIONS)
        requested = list(dict.fromkeys(permissions or []))
        unknown = [perm for perm in requested if perm not in ALL_PERMISSIONS]
        if unknown:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown permissions: {unknown}. Use: {list(ALL_PERMISSIONS)}"
            )
        return requested

    @staticmethod
    def register_user(user_in: UserCreate, db: Session) -> User:
        existing = db.query(User).filter(User.username == user_in.username).first()  # type: ignore
        if existing:
            raise HTTPException(status_code=409, detail="User with this username already exists.")

        new_user = User(
            username=user_in.username,
            hashed_password=AuthService.get_password_hash(user_in.password),
            role=user_in.role,
            permissions=AuthService.normalize_permissions(user_in.role, user_in.permissions),
            active=False,
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
        log.info("User %s created with role %s", new_user.username, new_user.role)
        return new_user

    @staticmethod
    def update_user(user: User, payload: UserUpdate, db: Session) -> User:
        if payload.username is not None and payload.username != user.username:
            clash = db.query(User).filter(User.username == payload.username).first()  # type: ignore
            if clash:
                raise HTTPException(status_code=409, detail="User with this username already exists.")
            user.username = payload.username  # type: ignore[assignment]
        if payload.password is not None:
            user.hashed_password = AuthService.get_password_hash(payload.password)  # type: ignore[assignment]
        role = payload.role if payload.role is not None else str(user.role)
        if payload.role is not None or payload.permissions is not None:
            permissions = payload.permissions if payload.permissions is not None else list(user.permissions or [])
            user.role = role  # type: ignore[assignment]
            user.permissions = AuthService.normalize_permissions(role, permissions)  # type: ignore[assignment]

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def authenticate_user(username: str, password: str, db: Session) -> User:
        """Look up the user and check the password. A failed attempt writes nothing."""
        user = db.query(User).filter(User.username == username).first()  # type: ignore
        if not user or not AuthService.verify_password(password, str(user.hashed_password)):
            log.info("Rejected login for %s", username)
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return user

    @staticmethod
    def mark_signed_in(user: User, db: Session) -> User:
        user.active = True  # type: ignore[assignment]
        user.last_login_at = datetime.utcnow()  # type: ignore[assignment]
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def mark_signed_out(user: User, db: Session) -> User:
        user.active = False  # type: ignore[assignment]
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user_from_token(token: str, db: Session) -> User:
        payload = AuthService.verify_token(token)
        user_id = str(payload.get("sub"))
        user = db.query(User).filter(User.id == user_id).first()  # type: ignore
        if user is None:
            raise HTTPException(status_code=401, detail="User not found")
        return user

    @staticmethod
    def ensure_default_admin(db: Session) -> Optional[User]:
        """Create the bootstrap admin when the user store holds no admin."""
        if db.query(User).filter(User.role == "admin").first():  # type: ignore
            return None

        username, password = get_default_admin_credentials()
        existing = db.query(User).filter(User.username == username).first()  # type: ignore
        if existing:
            existing.role = "admin"  # type: ignore[assignment]
            existing.permissions = list(ALL_PERMISSIONS)  # type: ignore[assignment]
            db.commit()
            log.warning("Promoted existing user %s to admin", username)
            return existing

        admin = User(
            username=username,
            hashed_password=AuthService.get_password_hash(password),
            role="admin",
            permissions=list(ALL_PERMISSIONS),
            active=False,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        log.warning("No admin account found; created default admin %s", username)
        return admin
