# toolroom/models/currency.py
import enum

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, UniqueConstraint

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class RateType(str, enum.Enum):
    usd = "usd"
    eur = "eur"
    gold = "gold"


class CurrencyRate(Base):
    """Monthly average TRY rate, either observed or forecast."""

    __tablename__ = "currency_rates"
    __table_args__ = (
        UniqueConstraint("year", "month", "rate_type", "is_forecast", name="uq_currency_rate_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    year = Column(Integer, nullable=False, index=True)
    month = Column(Integer, nullable=False)
    rate_type = Column(String(10), nullable=False)
    value = Column(Float, nullable=False)
    is_forecast = Column(Boolean, nullable=False, default=False)
    source = Column(String(30), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
