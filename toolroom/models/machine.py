# toolroom/models/machine.py
import enum

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, Numeric, String

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class MachineType(str, enum.Enum):
    turning = "turning"
    milling_4axis = "milling-4axis"
    milling_5axis = "milling-5axis"


class Machine(Base):
    __tablename__ = "machines"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)
    type = Column(String(30), nullable=False, index=True)
    designation = Column(String(100), nullable=False)
    brand = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    label = Column(String(150), nullable=False)
    factory = Column(String(100), nullable=False, default="")

    max_diameter_mm = Column(Float, nullable=True)
    power_kw = Column(Float, nullable=True)
    max_rpm = Column(Integer, nullable=True)
    taper = Column(String(30), nullable=True)
    has_live_tooling = Column(Boolean, nullable=False, default=False)
    has_y_axis = Column(Boolean, nullable=False, default=False)
    has_c_axis = Column(Boolean, nullable=False, default=False)
    travel_x_mm = Column(Float, nullable=True)
    travel_y_mm = Column(Float, nullable=True)
    travel_z_mm = Column(Float, nullable=True)

    # TRY per spindle minute, used by the cost calculator
    minute_rate = Column(Numeric(10, 2), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
