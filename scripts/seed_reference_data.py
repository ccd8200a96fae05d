# scripts/seed_reference_data.py
"""
Seed the machine park and persist the default navigation menu.

Both steps are idempotent: machines are matched by code and the menu is
only written while menu_categories is empty.
"""
from sqlalchemy.orm import Session

from toolroom.db.session import SessionLocal
from toolroom.services import machine_service, menu_service


def seed_machines(db: Session) -> None:
    created = machine_service.seed_default_machines(db)
    if created:
        print(f"[OK] {created} makine eklendi.")
    else:
        print("[INFO] Makine parkı zaten güncel.")


def seed_menu(db: Session) -> None:
    _, is_default = menu_service.load_menu(db)
    if not is_default:
        print("[INFO] Menü zaten yapılandırılmış, atlanıyor.")
        return
    categories = menu_service.save_menu(db, menu_service.default_menu())
    print(f"[OK] Varsayılan menü kaydedildi ({len(categories)} kategori).")


def main() -> None:
    db: Session = SessionLocal()
    try:
        seed_machines(db)
        seed_menu(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
