"""
Admin endpoints for user management and desk settings.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from api.dependencies import require_admin
from core.database import get_db
from models.user import ALL_PERMISSIONS, User
from schemas.user import UserCreate, UserResponse, UserUpdate
from services.auth_service import AuthService
from services.config_service import get_invoice_fy_suffix, set_invoice_fy_suffix

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class InvoiceSuffixUpdate(BaseModel):
    suffix: str = Field(..., min_length=1, pattern=r"^[0-9A-Za-z-]+$")


def _get_user(user_id: str, db: Session) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/users", response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    """List all users for admin management."""
    return db.query(User).order_by(User.username).all()


@router.get("/permissions")
def list_permissions():
    return {"roles": ["admin", "user"], "permissions": list(ALL_PERMISSIONS)}


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    """Create a new staff user."""
    return AuthService.register_user(payload, db)


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    """Update username, password, role or permissions."""
    user = _get_user(user_id, db)
    if str(user.id) == str(current_user.id) and payload.role == "user":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot remove your own admin role")
    return AuthService.update_user(user, payload, db)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = _get_user(user_id, db)
    if str(user.id) == str(current_user.id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

    db.delete(user)
    db.commit()
    return {"message": f"User {user.username} deleted"}


@router.get("/config/invoice-suffix")
def get_invoice_suffix():
    """Return the financial-year suffix used for completed-file invoice numbers."""
    return {"suffix": get_invoice_fy_suffix()}


@router.post("/config/invoice-suffix")
def update_invoice_suffix(payload: InvoiceSuffixUpdate):
    set_invoice_fy_suffix(payload.suffix)
    return {"suffix": get_invoice_fy_suffix()}
