# toolroom/services/permission_service.py
from sqlalchemy.orm import Session

from toolroom.core.errors import NotFoundError
from toolroom.core.logging import get_logger
from toolroom.data.menu import ADMIN_PANEL_KEYS, ADMIN_PANEL_LABELS
from toolroom.models import AdminPanelPermission

logger = get_logger(__name__)


def _check_panel(panel_key: str) -> None:
    if panel_key not in ADMIN_PANEL_KEYS:
        raise NotFoundError(f"Bilinmeyen panel: {panel_key}")


def _find(db: Session, user_id: int, panel_key: str) -> AdminPanelPermission | None:
    return (
        db.query(AdminPanelPermission)
        .filter(
            AdminPanelPermission.user_id == user_id,
            AdminPanelPermission.panel_key == panel_key,
        )
        .first()
    )


def can_view(db: Session, user_id: int, panel_key: str) -> bool:
    # no row means view only
    perm = _find(db, user_id, panel_key)
    return True if perm is None else perm.can_view


def can_edit(db: Session, user_id: int, panel_key: str) -> bool:
    perm = _find(db, user_id, panel_key)
    return False if perm is None else perm.can_edit


def effective_permissions(db: Session, user_id: int) -> list[dict]:
    """One entry per admin panel with defaults filled in."""
    rows = {
        p.panel_key: p
        for p in db.query(AdminPanelPermission).filter(AdminPanelPermission.user_id == user_id).all()
    }
    out = []
    for key in ADMIN_PANEL_KEYS:
        perm = rows.get(key)
        out.append(
            {
                "panel_key": key,
                "label": ADMIN_PANEL_LABELS[key],
                "can_view": True if perm is None else perm.can_view,
                "can_edit": False if perm is None else perm.can_edit,
            }
        )
    return out


def set_permission(
    db: Session,
    *,
    user_id: int,
    panel_key: str,
    can_view: bool = True,
    can_edit: bool = False,
) -> AdminPanelPermission:
    _check_panel(panel_key)
    perm = _find(db, user_id, panel_key)
    if perm is None:
        perm = AdminPanelPermission(user_id=user_id, panel_key=panel_key)
    perm.can_view = can_view
    # editing implies viewing
    perm.can_edit = can_edit and can_view
    db.add(perm)
    db.commit()
    db.refresh(perm)
    logger.info("panel_permission_set", user_id=user_id, panel_key=panel_key, can_view=perm.can_view, can_edit=perm.can_edit)
    return perm
