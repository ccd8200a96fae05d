# toolroom/models/permission.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class AdminPanelPermission(Base):
    __tablename__ = "admin_panel_permissions"
    __table_args__ = (
        UniqueConstraint("user_id", "panel_key", name="uq_admin_panel_permission"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    panel_key = Column(String(50), nullable=False)
    can_view = Column(Boolean, nullable=False, default=True)
    can_edit = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    user = relationship("User", back_populates="panel_permissions")
