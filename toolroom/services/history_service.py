# toolroom/services/history_service.py
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable

from sqlalchemy.orm import Session

from toolroom.core.clock import from_epoch_ms, utcnow
from toolroom.core.config import get_settings
from toolroom.core.errors import NotFoundError
from toolroom.core.logging import get_logger
from toolroom.models import CalculationType, SavedCalculation

logger = get_logger(__name__)

UNKNOWN_LABEL = "Bilinmiyor"


def plain_values(value: Any) -> Any:
    """Make calculator output JSON friendly."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {str(k): plain_values(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain_values(v) for v in value]
    if isinstance(value, Decimal):
        return float(value)
    return value


def save_calculation(
    db: Session,
    *,
    calculation_type: CalculationType | str,
    parameters: dict | Any,
    results: dict | Any,
    material: str | None = None,
    tool: str | None = None,
    notes: str | None = None,
    user_id: int | None = None,
) -> SavedCalculation:
    calc_type = CalculationType(calculation_type)
    record = SavedCalculation(
        calculation_type=calc_type.value,
        material=(material or "").strip() or UNKNOWN_LABEL,
        tool=(tool or "").strip() or UNKNOWN_LABEL,
        parameters=plain_values(parameters) or {},
        results=plain_values(results) or {},
        notes=notes,
        user_id=user_id,
        created_at=utcnow(),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("calculation_saved", calculation_id=record.id, calculation_type=calc_type.value)
    return record


def _history_query(db: Session, user_id: int | None, calculation_type: str | None):
    # anonymous callers only reach records nobody owns
    q = db.query(SavedCalculation)
    if user_id is None:
        q = q.filter(SavedCalculation.user_id.is_(None))
    else:
        q = q.filter(SavedCalculation.user_id == user_id)
    if calculation_type:
        q = q.filter(SavedCalculation.calculation_type == calculation_type)
    return q


def list_calculations(
    db: Session,
    *,
    user_id: int | None = None,
    calculation_type: str | None = None,
    limit: int | None = None,
) -> list[SavedCalculation]:
    """Newest first, capped at HISTORY_LIMIT."""
    cap = get_settings().HISTORY_LIMIT
    limit = cap if limit is None else max(0, min(limit, cap))
    return (
        _history_query(db, user_id, calculation_type)
        .order_by(SavedCalculation.created_at.desc(), SavedCalculation.id.desc())
        .limit(limit)
        .all()
    )


def count_calculations(db: Session, *, user_id: int | None = None) -> int:
    return _history_query(db, user_id, None).count()


def get_calculation(db: Session, calculation_id: int) -> SavedCalculation:
    record = db.get(SavedCalculation, calculation_id)
    if record is None:
        raise NotFoundError("Hesaplama kaydı bulunamadı.")
    return record


def delete_calculation(db: Session, calculation_id: int) -> None:
    deleted = (
        db.query(SavedCalculation)
        .filter(SavedCalculation.id == calculation_id)
        .delete(synchronize_session=False)
    )
    if deleted != 1:
        db.rollback()
        raise NotFoundError("Hesaplama kaydı bulunamadı.")
    db.commit()
    logger.info("calculation_deleted", calculation_id=calculation_id)


def clear_calculations(db: Session, *, user_id: int | None = None) -> int:
    deleted = _history_query(db, user_id, None).delete(synchronize_session=False)
    db.commit()
    logger.info("history_cleared", user_id=user_id, deleted=deleted)
    return deleted


def _imported_timestamp(value: Any) -> datetime:
    # browser-kept records carry epoch milliseconds
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        try:
            return from_epoch_ms(value)
        except (OverflowError, OSError, ValueError):
            logger.warning("history_import_bad_timestamp", value=value)
            return utcnow()
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return utcnow()
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    return utcnow()


def import_calculations(
    db: Session,
    records: Iterable[dict],
    *,
    user_id: int | None = None,
) -> int:
    """
    One-off migration of locally kept history. Runs only while the store is
    empty for this user; returns the number of rows written.
    """
    if count_calculations(db, user_id=user_id) > 0:
        logger.info("history_import_skipped", user_id=user_id, reason="not_empty")
        return 0

    imported = 0
    for item in records:
        try:
            calc_type = CalculationType(item.get("type") or item.get("calculation_type"))
        except ValueError:
            logger.warning("history_import_row_skipped", row_type=item.get("type"))
            continue
        db.add(
            SavedCalculation(
                calculation_type=calc_type.value,
                material=item.get("material") or UNKNOWN_LABEL,
                tool=item.get("tool") or UNKNOWN_LABEL,
                parameters=plain_values(item.get("parameters") or {}),
                results=plain_values(item.get("results") or {}),
                notes=item.get("notes"),
                user_id=user_id,
                created_at=_imported_timestamp(item.get("timestamp") or item.get("created_at")),
            )
        )
        imported += 1

    db.commit()
    logger.info("history_imported", user_id=user_id, imported=imported)
    return imported
