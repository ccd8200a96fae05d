# toolroom/api/machines.py
from datetime import datetime
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from toolroom.api.deps import admin_panel
from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.db.deps import get_db
from toolroom.models import MachineType, User
from toolroom.services import machine_service

router = APIRouter(prefix="/machines", tags=["machines"])

edit_machines = admin_panel("admin_machines", edit=True)


class MachineBase(BaseModel):
    code: str
    type: MachineType
    designation: str
    brand: str
    model: str
    year: int
    label: str
    factory: str = ""
    max_diameter_mm: float | None = None
    power_kw: float | None = None
    max_rpm: int | None = None
    taper: str | None = None
    has_live_tooling: bool = False
    has_y_axis: bool = False
    has_c_axis: bool = False
    travel_x_mm: float | None = None
    travel_y_mm: float | None = None
    travel_z_mm: float | None = None
    minute_rate: Decimal | None = None
    sort_order: int | None = None


class MachineCreate(MachineBase):
    pass


class MachineUpdate(BaseModel):
    code: str | None = None
    type: MachineType | None = None
    designation: str | None = None
    brand: str | None = None
    model: str | None = None
    year: int | None = None
    label: str | None = None
    factory: str | None = None
    max_diameter_mm: float | None = None
    power_kw: float | None = None
    max_rpm: int | None = None
    taper: str | None = None
    has_live_tooling: bool | None = None
    has_y_axis: bool | None = None
    has_c_axis: bool | None = None
    travel_x_mm: float | None = None
    travel_y_mm: float | None = None
    travel_z_mm: float | None = None
    minute_rate: Decimal | None = None
    is_active: bool | None = None
    sort_order: int | None = None


class MachineOut(MachineBase):
    id: int
    is_active: bool
    sort_order: int
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/", response_model=List[MachineOut])
def list_machines(
    machine_type: MachineType | None = Query(None, alias="type"),
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
):
    return machine_service.list_machines(
        db,
        machine_type=machine_type.value if machine_type else None,
        include_inactive=include_inactive,
    )


@router.get("/by-type", response_model=dict[str, List[MachineOut]])
def machines_by_type(db: Session = Depends(get_db)):
    return machine_service.machines_by_type(db)


@router.post("/seed")
def seed_machines(_: User = Depends(edit_machines), db: Session = Depends(get_db)):
    return {"created": machine_service.seed_default_machines(db)}


@router.get("/{machine_id}", response_model=MachineOut)
def get_machine(machine_id: int, db: Session = Depends(get_db)):
    try:
        return machine_service.get_machine(db, machine_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


@router.post("/", response_model=MachineOut, status_code=201)
def create_machine(
    machine_in: MachineCreate,
    _: User = Depends(edit_machines),
    db: Session = Depends(get_db),
):
    try:
        return machine_service.create_machine(db, **machine_in.model_dump())
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.put("/{machine_id}", response_model=MachineOut)
def update_machine(
    machine_id: int,
    machine_in: MachineUpdate,
    _: User = Depends(edit_machines),
    db: Session = Depends(get_db),
):
    try:
        return machine_service.update_machine(db, machine_id, **machine_in.model_dump(exclude_unset=True))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.post("/{machine_id}/deactivate", response_model=MachineOut)
def deactivate_machine(
    machine_id: int,
    _: User = Depends(edit_machines),
    db: Session = Depends(get_db),
):
    try:
        return machine_service.deactivate_machine(db, machine_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)


@router.delete("/{machine_id}", status_code=204)
def delete_machine(
    machine_id: int,
    _: User = Depends(edit_machines),
    db: Session = Depends(get_db),
):
    try:
        machine_service.delete_machine(db, machine_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
