from typing import List
from fastapi import Depends, HTTPException, status
from models.user import User
from core.security import get_current_user


class RoleChecker:
    def __init__(self, allowed_roles: List[str]):
        self.allowed_roles = allowed_roles

    def __call__(self, user: User = Depends(get_current_user)) -> User:
        user_role = str(user.role)

        if user_role not in self.allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Operation not permitted. Required roles: {self.allowed_roles}"
            )
        return user


class PermissionChecker:
    """Gate a route on a permission key; admins pass every gate."""

    def __init__(self, permission: str):
        self.permission = permission

    def __call__(self, user: User = Depends(get_current_user)) -> User:
        if str(user.role) == "admin":
            return user
        if self.permission not in (user.permissions or []):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Operation not permitted. Required permission: {self.permission}"
            )
        return user


# Define reusable dependencies
require_admin = RoleChecker(["admin"])
require_dashboard = PermissionChecker("dashboard")
require_add_booking = PermissionChecker("addBooking")
require_entries = PermissionChecker("entries")
require_completed_files = PermissionChecker("completedFiles")
require_master = PermissionChecker("master")
require_manage_master = PermissionChecker("manageMaster")
require_booking_request = PermissionChecker("bookingRequest")
require_locals = PermissionChecker("locals")
