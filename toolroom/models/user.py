# toolroom/models/user.py
import enum

from sqlalchemy import Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"


class UserStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(200), nullable=False)

    role = Column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.user,
    )
    status = Column(
        Enum(UserStatus, name="user_status"),
        nullable=False,
        default=UserStatus.active,
    )

    created_at = Column(DateTime, nullable=False, default=utcnow)

    panel_permissions = relationship(
        "AdminPanelPermission",
        back_populates="user",
        cascade="all, delete-orphan",
    )
