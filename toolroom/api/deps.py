# toolroom/api/deps.py
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from toolroom.db.deps import get_db
from toolroom.models import User, UserRole, UserStatus
from toolroom.services import permission_service


def get_session_user(request: Request) -> dict | None:
    return request.session.get("user")


def current_user_id(request: Request) -> int | None:
    user = get_session_user(request)
    return user["id"] if user else None


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    data = get_session_user(request)
    if not data:
        raise HTTPException(status_code=401, detail="Oturum açmanız gerekiyor.")
    user = db.get(User, data["id"])
    if user is None or user.status != UserStatus.active:
        request.session.pop("user", None)
        raise HTTPException(status_code=401, detail="Oturum geçersiz.")
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    if user.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Bu işlem için yönetici yetkisi gerekiyor.")
    return user


def admin_panel(panel_key: str, *, edit: bool = False):
    """Dependency: an admin allowed to view (or edit) the given panel."""

    def checker(user: User = Depends(require_admin), db: Session = Depends(get_db)) -> User:
        allowed = (
            permission_service.can_edit(db, user.id, panel_key)
            if edit
            else permission_service.can_view(db, user.id, panel_key)
        )
        if not allowed:
            raise HTTPException(status_code=403, detail="Bu panel için yetkiniz yok.")
        return user

    return checker
