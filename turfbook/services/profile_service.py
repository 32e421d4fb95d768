from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
import logging

from ..models.user import User, AVATAR_CHOICES
from ..core.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from ..core.security import verify_password, Identity
from ..schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, identity: Identity) -> User:
        user = self.db.query(User).filter(User.id == identity.user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, identity: Identity, data: ProfileUpdate) -> User:
        """Re-authenticate, then overwrite only the fields that were supplied."""
        user = self.get_user(identity)

        if not data.password or not verify_password(data.password, user.password_hash):
            raise AuthError("Incorrect password")

        for field in ("name", "email", "phone"):
            new_value = getattr(data, field)
            if not new_value or new_value == getattr(user, field):
                continue

            taken = self.db.query(User).filter(
                getattr(User, field) == new_value,
                User.id != user.id
            ).first()
            if taken:
                raise ConflictError(f"This {field} is already in use")

            setattr(user, field, new_value)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("Name, email or phone is already in use")
        self.db.refresh(user)

        return user

    def update_avatar(self, identity: Identity, avatar) -> User:
        if avatar not in AVATAR_CHOICES:
            raise ValidationError(
                f"Avatar must be one of: {', '.join(repr(a) for a in AVATAR_CHOICES)}"
            )

        user = self.get_user(identity)
        user.avatar = avatar
        self.db.commit()
        self.db.refresh(user)

        return user

    def deactivate_account(self, identity: Identity) -> User:
        """Soft-delete the caller's account. Repeating it is harmless."""
        user = self.get_user(identity)
        user.deleted = True
        self.db.commit()

        logger.info(f"User {user.id} deactivated their account")
        return user

    def list_users(self) -> List[User]:
        """All accounts, deactivated ones included."""
        return self.db.query(User).order_by(User.id).all()
