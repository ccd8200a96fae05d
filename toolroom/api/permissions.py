# toolroom/api/permissions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from toolroom.api.deps import admin_panel
from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.db.deps import get_db
from toolroom.models import User, UserRole, UserStatus
from toolroom.services import permission_service
from toolroom.services.auth import change_password, create_user, delete_user, update_user

router = APIRouter(prefix="/admin", tags=["admin"])

view_users = admin_panel("admin_users")
edit_users = admin_panel("admin_users", edit=True)


class UserOut(BaseModel):
    id: int
    username: str
    display_name: str | None
    role: UserRole
    status: UserStatus

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    username: str
    password: str
    display_name: str | None = None
    role: UserRole = UserRole.user


class UserUpdate(BaseModel):
    username: str | None = None
    display_name: str | None = None
    role: UserRole | None = None
    status: UserStatus | None = None


class PasswordChange(BaseModel):
    new_password: str = Field(min_length=6)


class PanelPermissionOut(BaseModel):
    panel_key: str
    label: str
    can_view: bool
    can_edit: bool


class PanelPermissionIn(BaseModel):
    can_view: bool = True
    can_edit: bool = False


def _user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="Kullanıcı bulunamadı.")
    return user


@router.get("/users", response_model=List[UserOut])
def list_users(_: User = Depends(view_users), db: Session = Depends(get_db)):
    return db.query(User).order_by(User.username).all()


@router.post("/users", response_model=UserOut, status_code=201)
def add_user(data: UserCreate, _: User = Depends(edit_users), db: Session = Depends(get_db)):
    try:
        return create_user(
            db,
            username=data.username,
            password=data.password,
            display_name=data.display_name,
            role=data.role,
        )
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.patch("/users/{user_id}", response_model=UserOut)
def edit_user(
    user_id: int,
    data: UserUpdate,
    current: User = Depends(edit_users),
    db: Session = Depends(get_db),
):
    _user(db, user_id)
    if user_id == current.id and (
        (data.role is not None and data.role != UserRole.admin)
        or (data.status is not None and data.status != UserStatus.active)
    ):
        raise HTTPException(status_code=400, detail="Kendi yönetici yetkinizi kaldıramazsınız.")
    try:
        return update_user(db, user_id, **data.model_dump(exclude_unset=True))
    except DuplicateError as exc:
        raise HTTPException(status_code=400, detail=exc.message)


@router.put("/users/{user_id}/password", status_code=204)
def set_password(
    user_id: int,
    data: PasswordChange,
    _: User = Depends(edit_users),
    db: Session = Depends(get_db),
):
    _user(db, user_id)
    change_password(db, user_id, data.new_password)


@router.delete("/users/{user_id}", status_code=204)
def remove_user(user_id: int, current: User = Depends(edit_users), db: Session = Depends(get_db)):
    _user(db, user_id)
    if user_id == current.id:
        raise HTTPException(status_code=400, detail="Kendi hesabınızı silemezsiniz.")
    delete_user(db, user_id)


@router.get("/users/{user_id}/permissions", response_model=List[PanelPermissionOut])
def get_permissions(user_id: int, _: User = Depends(view_users), db: Session = Depends(get_db)):
    _user(db, user_id)
    return permission_service.effective_permissions(db, user_id)


@router.put("/users/{user_id}/permissions/{panel_key}", response_model=List[PanelPermissionOut])
def set_permission(
    user_id: int,
    panel_key: str,
    data: PanelPermissionIn,
    _: User = Depends(edit_users),
    db: Session = Depends(get_db),
):
    _user(db, user_id)
    try:
        permission_service.set_permission(
            db,
            user_id=user_id,
            panel_key=panel_key,
            can_view=data.can_view,
            can_edit=data.can_edit,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    return permission_service.effective_permissions(db, user_id)
