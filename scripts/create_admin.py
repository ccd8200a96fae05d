# scripts/create_admin.py
import os

from sqlalchemy.orm import Session

from toolroom.data.menu import ADMIN_PANEL_KEYS
from toolroom.db.session import SessionLocal
from toolroom.models import User, UserRole, UserStatus
from toolroom.services.auth import create_user, set_user_password
from toolroom.services.permission_service import set_permission


def _env_value(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip()
    return value or default


def main() -> None:
    username = _env_value("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD") or ""
    display_name = _env_value("ADMIN_NAME", "Sistem Yöneticisi")

    if not username or not password:
        raise SystemExit("ADMIN_USERNAME veya ADMIN_PASSWORD eksik.")

    db: Session = SessionLocal()
    try:
        user = db.query(User).filter(User.username == username).first()
        if user:
            user.display_name = display_name
            user.role = UserRole.admin
            user.status = UserStatus.active
            set_user_password(user, password)
            db.commit()
            print(f"[OK] Yönetici güncellendi: {user.username}")
        else:
            user = create_user(
                db,
                username=username,
                password=password,
                display_name=display_name,
                role=UserRole.admin,
            )
            print(f"[OK] Yönetici oluşturuldu: {user.username} (id={user.id})")

        # edit rights are opt-in per panel
        for panel_key in ADMIN_PANEL_KEYS:
            set_permission(db, user_id=user.id, panel_key=panel_key, can_view=True, can_edit=True)
        print(f"[OK] {len(ADMIN_PANEL_KEYS)} panel için tam yetki verildi.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
