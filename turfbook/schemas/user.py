from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from ..core.security import UserRole


class UserRegister(BaseModel):
    """Registration body.

    Either ``type`` + ``value`` (preferred) or exactly one of the legacy
    ``email`` / ``phone`` fields identifies the account.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")
    type: Optional[str] = None
    value: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class UserLogin(BaseModel):
    value: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    type: Optional[str] = None
    value: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: Optional[str] = None
    otp: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None


class AvatarUpdate(BaseModel):
    avatar: Optional[str] = None


class UserSummary(BaseModel):
    """Public fields of an account, safe to attach to other resources."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole


class UserResponse(UserSummary):
    id: int


class UserDetail(UserResponse):
    avatar: str = ""
    deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
