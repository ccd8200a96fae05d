# toolroom/models/calculation.py
import enum

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from toolroom.core.clock import utcnow
from toolroom.db.base import Base


class CalculationType(str, enum.Enum):
    cutting = "cutting"
    toollife = "toollife"
    cost = "cost"
    threading = "threading"
    grinding = "grinding"
    drilling = "drilling"


CALCULATION_TYPE_LABELS = {
    CalculationType.cutting: "Kesme Hesaplama",
    CalculationType.toollife: "Takım Ömrü",
    CalculationType.cost: "Maliyet Analizi",
    CalculationType.threading: "Diş Açma",
    CalculationType.grinding: "Taşlama",
    CalculationType.drilling: "Delme/Raybalama",
}


class SavedCalculation(Base):
    """Write-once history row. Only deletion mutates the table."""

    __tablename__ = "saved_calculations"

    id = Column(Integer, primary_key=True, index=True)
    calculation_type = Column(String(20), nullable=False, index=True)
    material = Column(String(150), nullable=False, default="Bilinmiyor")
    tool = Column(String(150), nullable=False, default="Bilinmiyor")

    parameters = Column(JSON, nullable=False, default=dict)
    results = Column(JSON, nullable=False, default=dict)
    notes = Column(Text, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    @property
    def type_label(self) -> str:
        try:
            return CALCULATION_TYPE_LABELS[CalculationType(self.calculation_type)]
        except ValueError:
            return self.calculation_type
