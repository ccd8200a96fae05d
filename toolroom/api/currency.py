# toolroom/api/currency.py
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from toolroom.api.deps import require_admin
from toolroom.db.deps import get_db
from toolroom.models import RateType, User
from toolroom.services import currency_service
from toolroom.services.export_service import currency_xlsx

router = APIRouter(prefix="/currency", tags=["currency"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class CurrencyRateOut(BaseModel):
    id: int
    year: int
    month: int
    rate_type: str
    value: float
    is_forecast: bool
    source: str | None
    updated_at: datetime

    class Config:
        from_attributes = True


class CurrencyRateIn(BaseModel):
    year: int
    month: int
    rate_type: RateType
    value: float
    is_forecast: bool = False


class MonthlyRow(BaseModel):
    month: int
    usd: float
    eur: float
    gold: float


@router.get("/rates", response_model=List[CurrencyRateOut])
def list_rates(
    year: int | None = Query(None),
    is_forecast: bool | None = Query(None),
    db: Session = Depends(get_db),
):
    return currency_service.list_rates(db, year=year, is_forecast=is_forecast)


@router.put("/rates", response_model=CurrencyRateOut)
def upsert_rate(data: CurrencyRateIn, _: User = Depends(require_admin), db: Session = Depends(get_db)):
    try:
        return currency_service.upsert_rate(
            db,
            year=data.year,
            month=data.month,
            rate_type=data.rate_type.value,
            value=data.value,
            is_forecast=data.is_forecast,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/table/{year}", response_model=List[MonthlyRow])
def monthly_table(year: int, forecast: bool = Query(False), db: Session = Depends(get_db)):
    return currency_service.monthly_table(db, year, forecast)


@router.get("/summary")
def currency_summary(db: Session = Depends(get_db)):
    return currency_service.summary(db)


@router.get("/table/{year}/export.xlsx")
def export_table(year: int, forecast: bool = Query(False), db: Session = Depends(get_db)):
    rows = currency_service.monthly_table(db, year, forecast)
    if not rows:
        raise HTTPException(status_code=404, detail="Bu yıl için kur verisi yok.")
    kind = "tahmin" if forecast else "ortalama"
    return Response(
        content=currency_xlsx(rows, year, forecast),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="kur_{kind}_{year}.xlsx"'},
    )
