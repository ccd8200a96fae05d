# toolroom/api/menu.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from toolroom.api.deps import admin_panel
from toolroom.db.deps import get_db
from toolroom.models import User
from toolroom.services import menu_service

router = APIRouter(prefix="/menu", tags=["menu"])

edit_menu = admin_panel("admin_menu", edit=True)


class MenuCategoryIn(BaseModel):
    slug: str
    name: str
    icon: str | None = None
    color: str | None = None
    bg_color: str | None = None
    text_color: str | None = None
    border_color: str | None = None
    modules: list[str] = []

    @field_validator("slug", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Kategori adı ve kısa adı boş olamaz.")
        return v.strip()


class MenuCategoryOut(BaseModel):
    slug: str
    name: str
    icon: str
    color: str
    bg_color: str
    text_color: str
    border_color: str
    sort_order: int
    modules: list[str]


class MenuOut(BaseModel):
    categories: List[MenuCategoryOut]
    is_default: bool


@router.get("/", response_model=MenuOut)
def get_menu(db: Session = Depends(get_db)):
    categories, is_default = menu_service.load_menu(db)
    return {"categories": categories, "is_default": is_default}


@router.put("/", response_model=MenuOut)
def save_menu(
    categories: List[MenuCategoryIn],
    _: User = Depends(edit_menu),
    db: Session = Depends(get_db),
):
    slugs = [c.slug for c in categories]
    if len(slugs) != len(set(slugs)):
        raise HTTPException(status_code=400, detail="Kategori kısa adları benzersiz olmalı.")
    saved = menu_service.save_menu(db, [c.model_dump() for c in categories])
    return {"categories": saved, "is_default": False}


@router.post("/reset", response_model=MenuOut)
def reset_menu(_: User = Depends(edit_menu), db: Session = Depends(get_db)):
    return {"categories": menu_service.reset_menu(db), "is_default": True}
