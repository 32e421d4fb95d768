from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Optional, Tuple
import logging

from ..models.user import User
from ..models.otp import OTP
from ..core.config import settings
from ..core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import (
    verify_password, get_password_hash, create_access_token,
    generate_otp, UserRole
)
from ..schemas.user import (
    UserRegister, UserLogin, ForgotPasswordRequest, PasswordResetConfirm
)
from .notification_service import dispatch_otp

logger = logging.getLogger(__name__)

IDENTIFIER_TYPES = ("email", "phone")


def resolve_identifier(
    id_type: Optional[str],
    value: Optional[str],
    email: Optional[str] = None,
    phone: Optional[str] = None
) -> Tuple[str, str]:
    """Return the (field, value) pair that identifies an account.

    ``type`` + ``value`` wins when given; otherwise exactly one of
    ``email`` / ``phone`` must be set.
    """
    if id_type or value:
        if id_type not in IDENTIFIER_TYPES:
            raise ValidationError("Type must be either 'email' or 'phone'")
        if not value:
            raise ValidationError(f"A {id_type} value is required")
        return id_type, value

    if email and phone:
        raise ValidationError(
            "Please provide either an email or a phone number, not both"
        )
    if email:
        return "email", email
    if phone:
        return "phone", phone
    raise ValidationError("Either email or phone is required")


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new user."""
        if user_data.password != user_data.confirm_password:
            raise ValidationError("Passwords do not match")

        if not user_data.name or not user_data.password:
            raise ValidationError(
                "Name, password, and either email or phone are required"
            )

        field, value = resolve_identifier(
            user_data.type, user_data.value, user_data.email, user_data.phone
        )

        if self.db.query(User).filter(User.name == user_data.name).first():
            raise ConflictError("Username is already taken")

        if self.db.query(User).filter(getattr(User, field) == value).first():
            label = "Email" if field == "email" else "Phone number"
            raise ConflictError(f"{label} is already registered")

        new_user = User(
            name=user_data.name,
            password_hash=get_password_hash(user_data.password),
            role=UserRole.USER,
            **{field: value}
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration
            self.db.rollback()
            raise ConflictError("Username, email or phone is already registered")
        self.db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} ({field})")
        return new_user

    def authenticate_user(self, login_data: UserLogin) -> Tuple[str, User]:
        """Check credentials and return a session token with its user."""
        value = login_data.value or login_data.email or login_data.phone
        if not value or not login_data.password:
            raise ValidationError(
                "Password and either email or phone are required"
            )

        user = self.find_active_user(value)
        if not user:
            raise NotFoundError("User not found, please register first")

        if not verify_password(login_data.password, user.password_hash):
            logger.warning(f"Rejected login for user {user.id}")
            raise AuthError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return self.issue_token(user), user

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, user.role, user.name)

    def find_active_user(self, value: str, field: Optional[str] = None) -> Optional[User]:
        """Find a non-deleted user by email or phone (or by one given field)."""
        if field:
            criterion = getattr(User, field) == value
        else:
            criterion = or_(User.email == value, User.phone == value)

        return self.db.query(User).filter(
            criterion,
            User.deleted == False  # noqa: E712
        ).first()

    def request_password_reset(self, reset_data: ForgotPasswordRequest) -> OTP:
        """Issue a one-time code for the account and dispatch it."""
        if not reset_data.type or not reset_data.value:
            raise ValidationError("Type and value are required")
        if reset_data.type not in IDENTIFIER_TYPES:
            raise ValidationError("Type must be either 'email' or 'phone'")

        user = self.find_active_user(reset_data.value, field=reset_data.type)
        if not user:
            raise NotFoundError(f"No account found with this {reset_data.type}")

        self.cleanup_expired_otps()

        record = OTP(
            value=reset_data.value,
            otp=generate_otp(),
            expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        dispatch_otp(reset_data.type, reset_data.value, record.otp)
        return record

    def reset_password(self, reset_data: PasswordResetConfirm) -> User:
        """Reset password using a one-time code; the code is spent on success."""
        if not reset_data.value or not reset_data.otp or not reset_data.new_password:
            raise ValidationError("OTP, new password and value are required")

        record = self.db.query(OTP).filter(
            OTP.value == reset_data.value,
            OTP.otp == reset_data.otp,
            OTP.used == False,  # noqa: E712
            OTP.expires_at > datetime.utcnow()
        ).first()

        if not record:
            raise AuthError("Invalid or expired OTP")

        user = self.find_active_user(reset_data.value)
        if not user:
            raise NotFoundError("User not found")

        user.password_hash = get_password_hash(reset_data.new_password)
        record.used = True

        self.db.commit()
        logger.info(f"Password reset for user {user.id}")
        return user

    def cleanup_expired_otps(self) -> int:
        """Delete one-time codes past their expiry."""
        removed = self.db.query(OTP).filter(
            OTP.expires_at <= datetime.utcnow()
        ).delete(synchronize_session=False)

        self.db.commit()
        return removed
