# toolroom/api/materials.py
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from toolroom.api.deps import current_user_id, require_admin, require_user
from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.db.deps import get_db
from toolroom.models import CustomMaterial, User
from toolroom.services import material_service

router = APIRouter(prefix="/materials", tags=["materials"])


class CustomMaterialBase(BaseModel):
    name: str
    category: str
    hardness: str | None = None
    cutting_speed_min: float
    cutting_speed_max: float
    feed_rate_min: float
    feed_rate_max: float
    taylor_n: float = 0.2
    taylor_c: float = 250
    density: float = 7.85
    price_per_kg: Decimal | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Malzeme adı boş olamaz.")
        return v


class CustomMaterialCreate(CustomMaterialBase):
    pass


class CustomMaterialUpdate(BaseModel):
    name: str | None = None
    category: str | None = None
    hardness: str | None = None
    cutting_speed_min: float | None = None
    cutting_speed_max: float | None = None
    feed_rate_min: float | None = None
    feed_rate_max: float | None = None
    taylor_n: float | None = None
    taylor_c: float | None = None
    density: float | None = None
    price_per_kg: Decimal | None = None
    active: bool | None = None


class CustomMaterialOut(CustomMaterialBase):
    id: int
    key: str
    active: bool

    class Config:
        from_attributes = True


class MaterialSettingOut(BaseModel):
    material_key: str
    price_per_kg: Decimal | None
    afk_multiplier: Decimal | None
    updated_at: datetime

    class Config:
        from_attributes = True


class PriceIn(BaseModel):
    price_per_kg: Decimal

    @field_validator("price_per_kg")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Fiyat negatif olamaz.")
        return v


class AfkIn(BaseModel):
    afk_multiplier: Decimal

    @field_validator("afk_multiplier")
    @classmethod
    def validate_multiplier(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("AFK çarpanı 0'dan büyük olmalı.")
        return v


class PriceHistoryOut(BaseModel):
    id: int
    material_key: str
    change_type: str
    old_price: Decimal | None
    new_price: Decimal | None
    old_afk_multiplier: Decimal | None
    new_afk_multiplier: Decimal | None
    changed_by_name: str | None
    source: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/")
def list_materials(include_inactive: bool = Query(False), db: Session = Depends(get_db)):
    """Built-in reference materials followed by custom ones."""
    return [asdict(m) for m in material_service.list_materials(db, include_inactive=include_inactive)]


@router.get("/custom", response_model=List[CustomMaterialOut])
def list_custom_materials(db: Session = Depends(get_db)):
    return db.query(CustomMaterial).order_by(CustomMaterial.name).all()


@router.post("/custom", response_model=CustomMaterialOut, status_code=201)
def create_custom_material(
    material_in: CustomMaterialCreate,
    request: Request,
    _: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        return material_service.create_custom_material(
            db, user_id=current_user_id(request), **material_in.model_dump()
        )
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.put("/custom/{material_id}", response_model=CustomMaterialOut)
def update_custom_material(
    material_id: int,
    material_in: CustomMaterialUpdate,
    _: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        return material_service.update_custom_material(
            db, material_id, **material_in.model_dump(exclude_unset=True)
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.delete("/custom/{material_id}", status_code=204)
def delete_custom_material(
    material_id: int,
    _: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        material_service.delete_custom_material(db, material_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


@router.get("/settings", response_model=List[MaterialSettingOut])
def list_settings(db: Session = Depends(get_db)):
    return material_service.list_settings(db)


@router.put("/{material_key}/price", response_model=MaterialSettingOut)
def update_price(
    material_key: str,
    data: PriceIn,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return material_service.update_price(db, material_key=material_key, price=data.price_per_kg, user=user)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


@router.put("/{material_key}/afk", response_model=MaterialSettingOut)
def update_afk(
    material_key: str,
    data: AfkIn,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return material_service.update_afk_multiplier(
            db, material_key=material_key, multiplier=data.afk_multiplier, user=user
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


@router.get("/{material_key}/price-history", response_model=List[PriceHistoryOut])
def price_history(
    material_key: str,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return material_service.price_history(db, material_key, limit=limit)


@router.get("/{material_key}")
def get_material(material_key: str, db: Session = Depends(get_db)):
    try:
        return asdict(material_service.resolve_material(db, material_key))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
