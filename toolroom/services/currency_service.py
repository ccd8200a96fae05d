# toolroom/services/currency_service.py
from sqlalchemy import func
from sqlalchemy.orm import Session

from toolroom.core.clock import utcnow
from toolroom.core.numbers import round_half_up, round_int, safe_div
from toolroom.core.logging import get_logger
from toolroom.models import CurrencyRate, RateType
from toolroom.services.ai_gateway import AIGateway, AIGatewayError

logger = get_logger(__name__)

RATE_TYPES = tuple(t.value for t in RateType)
SOURCE_AI = "ai_forecast"
SOURCE_LINEAR = "linear_extrapolation"

FORECAST_PROMPT = """You are a financial analyst. Based on the following monthly average exchange rate data for Turkey, provide {year} monthly forecasts.

Historical USD/TRY: {usd}
Historical EUR/TRY: {eur}
Historical Gold Gram TRY: {gold}

Consider these factors for Turkish economy:
- TCMB monetary policy direction and interest rate trajectory
- Inflation expectations and CPI trends
- Global commodity prices impact on gold
- EUR/USD parity effects
- Seasonal patterns in Turkish economy

Provide EXACTLY 36 values (12 months x 3 rate types) in this JSON format:
{{
  "usd": [jan, feb, mar, apr, may, jun, jul, aug, sep, oct, nov, dec],
  "eur": [jan, feb, mar, apr, may, jun, jul, aug, sep, oct, nov, dec],
  "gold": [jan, feb, mar, apr, may, jun, jul, aug, sep, oct, nov, dec]
}}

Only output the JSON, no explanation. Values should be numbers with 2 decimal places (except gold which should be integers)."""


def list_rates(db: Session, *, year: int | None = None, is_forecast: bool | None = None) -> list[CurrencyRate]:
    q = db.query(CurrencyRate)
    if year is not None:
        q = q.filter(CurrencyRate.year == year)
    if is_forecast is not None:
        q = q.filter(CurrencyRate.is_forecast.is_(is_forecast))
    return q.order_by(CurrencyRate.year, CurrencyRate.month, CurrencyRate.rate_type).all()


def upsert_rate(
    db: Session,
    *,
    year: int,
    month: int,
    rate_type: str,
    value: float,
    is_forecast: bool = False,
    source: str = "manual",
) -> CurrencyRate:
    if not 1 <= month <= 12:
        raise ValueError("Ay 1 ile 12 arasında olmalı.")
    rate_type = RateType(rate_type).value
    row = (
        db.query(CurrencyRate)
        .filter(
            CurrencyRate.year == year,
            CurrencyRate.month == month,
            CurrencyRate.rate_type == rate_type,
            CurrencyRate.is_forecast.is_(is_forecast),
        )
        .first()
    )
    if row is None:
        row = CurrencyRate(year=year, month=month, rate_type=rate_type, is_forecast=is_forecast)
    row.value = value
    row.source = source
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def monthly_table(db: Session, year: int, is_forecast: bool) -> list[dict]:
    """One row per month: {"month", "usd", "eur", "gold"}."""
    table: dict[int, dict] = {}
    for rate in list_rates(db, year=year, is_forecast=is_forecast):
        row = table.setdefault(rate.month, {"month": rate.month, "usd": 0.0, "eur": 0.0, "gold": 0.0})
        row[rate.rate_type] = rate.value
    return [table[m] for m in sorted(table)]


def latest_historical_year(db: Session) -> int | None:
    return db.query(func.max(CurrencyRate.year)).filter(CurrencyRate.is_forecast.is_(False)).scalar()


def summary(db: Session) -> dict:
    """Averages of the latest observed year and change to the last forecast month."""
    year = latest_historical_year(db)
    if year is None:
        return {"historical_year": None, "forecast_year": None, "averages": {}, "changes": {}, "last_update": None}

    historical = monthly_table(db, year, False)
    forecast = monthly_table(db, year + 1, True)

    averages = {}
    changes = {}
    for rate_type in RATE_TYPES:
        avg = safe_div(sum(r[rate_type] for r in historical), len(historical))
        averages[rate_type] = round_half_up(avg, 0 if rate_type == "gold" else 2)
        if historical and forecast:
            first, last = historical[-1][rate_type], forecast[-1][rate_type]
            changes[rate_type] = round_half_up(safe_div(last - first, first) * 100, 1)
        else:
            changes[rate_type] = 0.0

    last_update = (
        db.query(func.max(CurrencyRate.updated_at)).filter(CurrencyRate.is_forecast.is_(True)).scalar()
    )
    return {
        "historical_year": year,
        "forecast_year": year + 1,
        "averages": averages,
        "changes": changes,
        "last_update": last_update,
    }


def _series(db: Session, rate_type: str) -> list[CurrencyRate]:
    return (
        db.query(CurrencyRate)
        .filter(CurrencyRate.rate_type == rate_type, CurrencyRate.is_forecast.is_(False))
        .order_by(CurrencyRate.year, CurrencyRate.month)
        .all()
    )


def build_forecast_prompt(history: dict[str, list[CurrencyRate]], year: int) -> str:
    def fmt(rows: list[CurrencyRate]) -> str:
        return ", ".join(f"{r.year}-{r.month:02d}: {r.value}" for r in rows)

    return FORECAST_PROMPT.format(year=year, usd=fmt(history["usd"]), eur=fmt(history["eur"]), gold=fmt(history["gold"]))


def linear_extrapolation(values: list[float], months: int = 12) -> list[float]:
    """Continue the last month-over-month step."""
    last = values[-1] if values else 0.0
    second_last = values[-2] if len(values) > 1 else last
    step = last - second_last
    return [round_half_up(last + step * (i + 1), 2) for i in range(months)]


def _valid_forecast(data: dict | None) -> bool:
    if not data:
        return False
    for rate_type in RATE_TYPES:
        values = data.get(rate_type)
        if not isinstance(values, list) or len(values) != 12:
            return False
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            return False
    return True


async def update_forecasts(db: Session, gateway: AIGateway) -> dict:
    """
    Rebuild next year's forecasts from the observed series. Uses the AI
    gateway when configured and falls back to linear extrapolation.
    """
    latest = latest_historical_year(db)
    year = (latest or utcnow().year) + 1
    history = {rate_type: _series(db, rate_type) for rate_type in RATE_TYPES}

    forecasts = None
    if gateway.configured:
        try:
            forecasts = await gateway.request_forecast(build_forecast_prompt(history, year))
        except AIGatewayError as exc:
            logger.warning("forecast_ai_failed", status_code=exc.status_code, message=exc.message)
        if not _valid_forecast(forecasts):
            forecasts = None

    source = SOURCE_AI
    if forecasts is None:
        source = SOURCE_LINEAR
        forecasts = {t: linear_extrapolation([r.value for r in history[t]]) for t in RATE_TYPES}
        forecasts["gold"] = [float(round_int(v)) for v in forecasts["gold"]]

    db.query(CurrencyRate).filter(
        CurrencyRate.year == year,
        CurrencyRate.is_forecast.is_(True),
    ).delete(synchronize_session=False)

    updated = 0
    for rate_type in RATE_TYPES:
        for month, value in enumerate(forecasts[rate_type], start=1):
            db.add(
                CurrencyRate(
                    year=year,
                    month=month,
                    rate_type=rate_type,
                    value=float(value),
                    is_forecast=True,
                    source=source,
                )
            )
            updated += 1
    db.commit()

    logger.info("forecasts_updated", year=year, source=source, updated=updated)
    return {"success": True, "year": year, "updated": updated, "source": source}
