# toolroom/models/material.py
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class CustomMaterial(Base):
    """User-added material; same shape as the built-in reference table."""

    __tablename__ = "custom_materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True, index=True)
    category = Column(String(100), nullable=False)
    hardness = Column(String(50), nullable=True)

    cutting_speed_min = Column(Float, nullable=False)
    cutting_speed_max = Column(Float, nullable=False)
    feed_rate_min = Column(Float, nullable=False)
    feed_rate_max = Column(Float, nullable=False)

    taylor_n = Column(Float, nullable=False, default=0.2)
    taylor_c = Column(Float, nullable=False, default=250)
    density = Column(Float, nullable=False, default=7.85)
    price_per_kg = Column(Numeric(10, 2), nullable=True)

    active = Column(Boolean, nullable=False, default=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def key(self) -> str:
        return f"custom-{self.id}"


class MaterialSetting(Base):
    __tablename__ = "material_settings"

    id = Column(Integer, primary_key=True, index=True)
    # built-in id ("steel-low") or "custom-<id>"
    material_key = Column(String(50), nullable=False, unique=True, index=True)
    price_per_kg = Column(Numeric(10, 2), nullable=True)
    afk_multiplier = Column(Numeric(6, 3), nullable=True)

    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class MaterialPriceHistory(Base):
    __tablename__ = "material_price_history"

    id = Column(Integer, primary_key=True, index=True)
    material_key = Column(String(50), nullable=False, index=True)
    change_type = Column(String(20), nullable=False, default="price")  # "price" / "afk_multiplier"

    old_price = Column(Numeric(10, 2), nullable=True)
    new_price = Column(Numeric(10, 2), nullable=True)
    old_afk_multiplier = Column(Numeric(6, 3), nullable=True)
    new_afk_multiplier = Column(Numeric(6, 3), nullable=True)

    changed_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    changed_by_name = Column(String(200), nullable=True)
    source = Column(String(20), nullable=False, default="api")

    created_at = Column(DateTime, nullable=False, default=utcnow)
