# toolroom/api/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from toolroom.api.deps import require_user
from toolroom.db.deps import get_db
from toolroom.models import User
from toolroom.services import permission_service
from toolroom.services.auth import authenticate_user, session_payload

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginIn(BaseModel):
    username: str
    password: str


class SessionUserOut(BaseModel):
    id: int
    username: str
    display_name: str
    role: str


class MeOut(SessionUserOut):
    permissions: list[dict] = []


@router.post("/login", response_model=SessionUserOut)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    user = authenticate_user(db=db, username=payload.username, password=payload.password)
    if not user:
        raise HTTPException(status_code=400, detail="Kullanıcı adı veya şifre hatalı ya da kullanıcı pasif.")

    request.session["user"] = session_payload(user)
    return request.session["user"]


@router.post("/logout")
def logout(request: Request):
    request.session.pop("user", None)
    return {"ok": True}


@router.get("/me", response_model=MeOut)
def me(user: User = Depends(require_user), db: Session = Depends(get_db)):
    data = session_payload(user)
    if data["role"] == "admin":
        data["permissions"] = permission_service.effective_permissions(db, user.id)
    return data
