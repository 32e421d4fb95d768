from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import Identity
from ...api.deps import get_current_identity, get_admin_identity, otp_rate_limit_check
from ...services.auth_service import AuthService
from ...services.profile_service import ProfileService
from ...schemas.user import (
    UserRegister, UserLogin, ForgotPasswordRequest, PasswordResetConfirm,
    ProfileUpdate, AvatarUpdate, UserResponse, UserDetail
)

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """Register a new user."""
    auth_service = AuthService(db)
    user = auth_service.register_user(user_data)

    if user_data.type or user_data.value:
        return {
            "success": True,
            "message": "Account created successfully",
            "token": auth_service.issue_token(user),
            "user": UserResponse.model_validate(user),
        }

    return {
        "success": True,
        "message": "Account created successfully, please log in",
    }


@router.post("/login")
def login(
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """Authenticate user and return a session token."""
    token, user = AuthService(db).authenticate_user(login_data)

    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": UserResponse.model_validate(user),
    }


@router.post("/initiate-forgot-password")
def forgot_password(
    reset_data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    _: None = Depends(otp_rate_limit_check)
):
    """Send a one-time code to the account's email or phone."""
    AuthService(db).request_password_reset(reset_data)

    return {"success": True, "message": f"OTP sent to your {reset_data.type}"}


@router.post("/verify-otp-generate-password")
def reset_password(
    reset_data: PasswordResetConfirm,
    db: Session = Depends(get_db)
):
    """Reset password using a one-time code."""
    AuthService(db).reset_password(reset_data)

    return {"success": True, "message": "Password reset successfully"}


@router.post("/update-profile")
def update_profile(
    profile_data: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    user = ProfileService(db).update_profile(identity, profile_data)

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": UserResponse.model_validate(user),
    }


@router.patch("/update-avatar")
def update_avatar(
    avatar_data: AvatarUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    user = ProfileService(db).update_avatar(identity, avatar_data.avatar)

    return {
        "success": True,
        "message": "Avatar updated successfully",
        "avatar": user.avatar,
    }


@router.patch("/deactivate-account")
def deactivate_account(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    ProfileService(db).deactivate_account(identity)

    return {"success": True, "message": "Account deactivated successfully"}


@router.get("/list-users")
def list_users(
    identity: Identity = Depends(get_admin_identity),
    db: Session = Depends(get_db)
):
    """List all users (admin only)."""
    users = ProfileService(db).list_users()

    return {
        "success": True,
        "message": "Users fetched successfully",
        "users": [UserDetail.model_validate(user) for user in users],
    }
