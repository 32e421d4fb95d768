from sqlalchemy import Column, Integer, String, DateTime, Boolean, CheckConstraint, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates

from ..core.database import Base
from ..core.security import UserRole

# "" means no avatar selected
AVATAR_CHOICES = ("", "avatar1", "avatar2", "avatar3", "avatar4", "avatar5")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "email IS NOT NULL OR phone IS NOT NULL",
            name="ck_users_email_or_phone",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    # NULLs never collide, so uniqueness only binds values that are present
    email = Column(String(255), unique=True, index=True, nullable=True)
    phone = Column(String(32), unique=True, index=True, nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.USER)
    avatar = Column(String(20), nullable=False, default="")
    deleted = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="user")

    @validates("avatar")
    def validate_avatar(self, key, value):
        if value not in AVATAR_CHOICES:
            raise ValueError(f"Unknown avatar '{value}'")
        return value

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"
