# toolroom/services/material_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from toolroom.core.clock import utcnow
from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.core.logging import get_logger
from toolroom.data.materials import MATERIALS, Material, get_reference_material
from toolroom.models import CustomMaterial, MaterialPriceHistory, MaterialSetting, User

logger = get_logger(__name__)

CUSTOM_PREFIX = "custom-"

CUSTOM_FIELDS = (
    "name",
    "category",
    "hardness",
    "cutting_speed_min",
    "cutting_speed_max",
    "feed_rate_min",
    "feed_rate_max",
    "taylor_n",
    "taylor_c",
    "density",
    "price_per_kg",
    "active",
)


def to_material(row: CustomMaterial) -> Material:
    return Material(
        key=row.key,
        name=row.name,
        category=row.category,
        hardness=row.hardness or "",
        cutting_speed_min=row.cutting_speed_min,
        cutting_speed_max=row.cutting_speed_max,
        feed_rate_min=row.feed_rate_min,
        feed_rate_max=row.feed_rate_max,
        taylor_n=row.taylor_n,
        taylor_c=row.taylor_c,
        density=row.density,
        price_per_kg=float(row.price_per_kg) if row.price_per_kg is not None else None,
        custom=True,
    )


def list_materials(db: Session, *, include_inactive: bool = False) -> list[Material]:
    """Built-in materials followed by custom ones."""
    q = db.query(CustomMaterial)
    if not include_inactive:
        q = q.filter(CustomMaterial.active.is_(True))
    customs = q.order_by(CustomMaterial.name).all()
    return list(MATERIALS) + [to_material(c) for c in customs]


def _custom_id(key: str) -> int | None:
    if not key.startswith(CUSTOM_PREFIX):
        return None
    try:
        return int(key[len(CUSTOM_PREFIX):])
    except ValueError:
        return None


def resolve_material(db: Session, key: str) -> Material:
    """Built-in key ("steel-low") or "custom-<id>"."""
    material = get_reference_material(key)
    if material is not None:
        return material
    custom_id = _custom_id(key)
    if custom_id is not None:
        row = db.get(CustomMaterial, custom_id)
        if row is not None:
            return to_material(row)
    raise NotFoundError(f"Malzeme bulunamadı: {key}")


def get_custom_material(db: Session, material_id: int) -> CustomMaterial:
    row = db.get(CustomMaterial, material_id)
    if row is None:
        raise NotFoundError("Malzeme bulunamadı.")
    return row


def _check_name(db: Session, name: str, exclude_id: int | None = None) -> None:
    q = db.query(CustomMaterial).filter(CustomMaterial.name == name)
    if exclude_id is not None:
        q = q.filter(CustomMaterial.id != exclude_id)
    if q.first() or any(m.name == name for m in MATERIALS):
        raise DuplicateError("Bu isimde bir malzeme zaten var.")


def create_custom_material(db: Session, *, user_id: int | None = None, **fields) -> CustomMaterial:
    name = fields["name"].strip()
    _check_name(db, name)
    data = {k: v for k, v in fields.items() if k in CUSTOM_FIELDS and v is not None}
    data["name"] = name
    row = CustomMaterial(user_id=user_id, **data)
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("custom_material_created", material_key=row.key)
    return row


def update_custom_material(db: Session, material_id: int, **fields) -> CustomMaterial:
    row = get_custom_material(db, material_id)
    if fields.get("name"):
        name = fields["name"].strip()
        _check_name(db, name, exclude_id=row.id)
        fields["name"] = name
    for key, value in fields.items():
        if key in CUSTOM_FIELDS and value is not None:
            setattr(row, key, value)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def delete_custom_material(db: Session, material_id: int) -> None:
    row = get_custom_material(db, material_id)
    db.query(MaterialSetting).filter(MaterialSetting.material_key == row.key).delete(synchronize_session=False)
    db.delete(row)
    db.commit()
    logger.info("custom_material_deleted", material_id=material_id)


# -- settings: price per kg and AFK multiplier --------------------------------


def list_settings(db: Session) -> list[MaterialSetting]:
    return db.query(MaterialSetting).order_by(MaterialSetting.material_key).all()


def _get_or_create_setting(db: Session, material_key: str) -> MaterialSetting:
    setting = db.query(MaterialSetting).filter(MaterialSetting.material_key == material_key).first()
    if setting is None:
        setting = MaterialSetting(material_key=material_key)
    return setting


def afk_pricing(db: Session, material_key: str) -> tuple[Material, Decimal, Decimal]:
    """
    Price per kg and AFK multiplier for a material. A stored positive price
    wins over the material's list price; a missing multiplier reads as 1.
    """
    material = resolve_material(db, material_key)
    setting = db.query(MaterialSetting).filter(MaterialSetting.material_key == material_key).first()

    price = Decimal(str(material.price_per_kg)) if material.price_per_kg is not None else Decimal("0")
    multiplier = Decimal("1")
    if setting is not None:
        if setting.price_per_kg is not None and Decimal(setting.price_per_kg) > 0:
            price = Decimal(setting.price_per_kg)
        if setting.afk_multiplier is not None:
            multiplier = Decimal(setting.afk_multiplier)
    return material, price, multiplier


def _changed_by_name(user: User | None) -> str:
    if user is None:
        return "Bilinmiyor"
    return user.display_name or user.username


def update_price(
    db: Session,
    *,
    material_key: str,
    price: Decimal,
    user: User | None = None,
    source: str = "api",
) -> MaterialSetting:
    """
    Upsert the material's price per kg and log the change to
    MaterialPriceHistory when the value actually moved.
    """
    resolve_material(db, material_key)
    now = utcnow()

    setting = _get_or_create_setting(db, material_key)
    old_price = setting.price_per_kg
    setting.price_per_kg = price
    setting.updated_by = user.id if user else None
    db.add(setting)

    if old_price is None or Decimal(old_price) != Decimal(price):
        db.add(
            MaterialPriceHistory(
                material_key=material_key,
                change_type="price",
                old_price=old_price or Decimal("0"),
                new_price=price,
                changed_by=user.id if user else None,
                changed_by_name=_changed_by_name(user),
                source=source,
                created_at=now,
            )
        )

    db.commit()
    db.refresh(setting)
    logger.info("material_price_updated", material_key=material_key, old=str(old_price), new=str(price))
    return setting


def update_afk_multiplier(
    db: Session,
    *,
    material_key: str,
    multiplier: Decimal,
    user: User | None = None,
    source: str = "api",
) -> MaterialSetting:
    resolve_material(db, material_key)

    setting = _get_or_create_setting(db, material_key)
    old = setting.afk_multiplier
    setting.afk_multiplier = multiplier
    setting.updated_by = user.id if user else None
    db.add(setting)

    if old is None or Decimal(old) != Decimal(multiplier):
        db.add(
            MaterialPriceHistory(
                material_key=material_key,
                change_type="afk_multiplier",
                old_afk_multiplier=old,
                new_afk_multiplier=multiplier,
                changed_by=user.id if user else None,
                changed_by_name=_changed_by_name(user),
                source=source,
                created_at=utcnow(),
            )
        )

    db.commit()
    db.refresh(setting)
    return setting


def price_history(db: Session, material_key: str, limit: int = 50) -> list[MaterialPriceHistory]:
    return (
        db.query(MaterialPriceHistory)
        .filter(MaterialPriceHistory.material_key == material_key)
        .order_by(MaterialPriceHistory.created_at.desc(), MaterialPriceHistory.id.desc())
        .limit(limit)
        .all()
    )
