# toolroom/api/history.py
"""
Calculation history. A signed-in user sees and manages only their own
records; anonymous requests work on the shared, unowned history.
"""
from datetime import datetime
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from toolroom.api.deps import current_user_id
from toolroom.core.errors import NotFoundError
from toolroom.db.deps import get_db
from toolroom.models import CalculationType, SavedCalculation
from toolroom.services import export_service, history_service

router = APIRouter(prefix="/history", tags=["history"])


class CalculationRecordOut(BaseModel):
    id: int
    calculation_type: str
    type_label: str
    material: str
    tool: str
    parameters: dict[str, Any]
    results: dict[str, Any]
    notes: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class CalculationCreate(BaseModel):
    calculation_type: CalculationType
    material: str | None = None
    tool: str | None = None
    parameters: dict[str, Any] = {}
    results: dict[str, Any] = {}
    notes: str | None = None


class ImportIn(BaseModel):
    records: list[dict[str, Any]]


def _owned(db: Session, request: Request, calculation_id: int) -> SavedCalculation:
    try:
        record = history_service.get_calculation(db, calculation_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    user_id = current_user_id(request)
    if record.user_id != user_id:
        raise HTTPException(status_code=404, detail="Hesaplama kaydı bulunamadı.")
    return record


@router.get("/", response_model=List[CalculationRecordOut])
def list_history(
    request: Request,
    calculation_type: CalculationType | None = Query(None, alias="type"),
    limit: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return history_service.list_calculations(
        db,
        user_id=current_user_id(request),
        calculation_type=calculation_type.value if calculation_type else None,
        limit=limit,
    )


@router.post("/", response_model=CalculationRecordOut, status_code=201)
def create_record(data: CalculationCreate, request: Request, db: Session = Depends(get_db)):
    return history_service.save_calculation(
        db,
        calculation_type=data.calculation_type,
        material=data.material,
        tool=data.tool,
        parameters=data.parameters,
        results=data.results,
        notes=data.notes,
        user_id=current_user_id(request),
    )


@router.post("/import")
def import_history(data: ImportIn, request: Request, db: Session = Depends(get_db)):
    imported = history_service.import_calculations(db, data.records, user_id=current_user_id(request))
    return {"imported": imported}


@router.delete("/")
def clear_history(request: Request, db: Session = Depends(get_db)):
    return {"deleted": history_service.clear_calculations(db, user_id=current_user_id(request))}


@router.get("/export.csv")
def export_csv(request: Request, db: Session = Depends(get_db)):
    records = history_service.list_calculations(db, user_id=current_user_id(request))
    filename = f"hesaplama_gecmisi_{datetime.now():%Y-%m-%d}.csv"
    return Response(
        content=export_service.history_csv(records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.pdf")
def export_pdf(request: Request, db: Session = Depends(get_db)):
    records = history_service.list_calculations(db, user_id=current_user_id(request))
    filename = f"hesaplama_gecmisi_{datetime.now():%Y-%m-%d}.pdf"
    return Response(
        content=export_service.history_pdf(records),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{calculation_id}", response_model=CalculationRecordOut)
def get_record(calculation_id: int, request: Request, db: Session = Depends(get_db)):
    return _owned(db, request, calculation_id)


@router.get("/{calculation_id}/pdf")
def record_pdf(calculation_id: int, request: Request, db: Session = Depends(get_db)):
    record = _owned(db, request, calculation_id)
    filename = f"{record.calculation_type}_{record.created_at:%Y-%m-%d}.pdf"
    return Response(
        content=export_service.calculation_pdf(record),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/{calculation_id}", status_code=204)
def delete_record(calculation_id: int, request: Request, db: Session = Depends(get_db)):
    _owned(db, request, calculation_id)
    try:
        history_service.delete_calculation(db, calculation_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
