# toolroom/api/dashboard.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from toolroom.api.deps import current_user_id
from toolroom.api.history import CalculationRecordOut
from toolroom.db.deps import get_db
from toolroom.models import CustomMaterial, Machine
from toolroom.services import history_service, menu_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

RECENT_LIMIT = 5


@router.get("/")
def dashboard(request: Request, db: Session = Depends(get_db)):
    user_id = current_user_id(request)
    categories, is_default = menu_service.load_menu(db)
    recent = history_service.list_calculations(db, user_id=user_id, limit=RECENT_LIMIT)

    return {
        "menu": {"categories": categories, "is_default": is_default},
        "counts": {
            "calculations": history_service.count_calculations(db, user_id=user_id),
            "machines": db.query(Machine).filter(Machine.is_active.is_(True)).count(),
            "custom_materials": db.query(CustomMaterial).filter(CustomMaterial.active.is_(True)).count(),
        },
        "recent_calculations": [CalculationRecordOut.model_validate(r).model_dump() for r in recent],
    }
