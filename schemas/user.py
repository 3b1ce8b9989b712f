from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: Literal["admin", "user"] = "user"
    permissions: list[str] = Field(default_factory=list)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[Literal["admin", "user"]] = None
    permissions: Optional[list[str]] = None


class UserResponse(BaseModel):
    id: str
    username: str
    role: str
    permissions: list[str]
    active: bool
    created_at: Optional[datetime]
    last_login_at: Optional[datetime]
    model_config = ConfigDict(from_attributes=True)
