# toolroom/models/menu.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class MenuCategory(Base):
    __tablename__ = "menu_categories"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(50), nullable=False, unique=True)
    name = Column(String(100), nullable=False)
    icon = Column(String(50), nullable=False, default="Folder")
    color = Column(String(100), nullable=False, default="")
    bg_color = Column(String(100), nullable=False, default="")
    text_color = Column(String(100), nullable=False, default="")
    border_color = Column(String(100), nullable=False, default="")
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    modules = relationship(
        "MenuCategoryModule",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="MenuCategoryModule.sort_order",
    )


class MenuCategoryModule(Base):
    __tablename__ = "menu_category_modules"
    __table_args__ = (
        UniqueConstraint("category_id", "module_key", name="uq_menu_category_module"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("menu_categories.id"), nullable=False, index=True)
    module_key = Column(String(50), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    category = relationship("MenuCategory", back_populates="modules")
