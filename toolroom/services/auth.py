# toolroom/services/auth.py
from sqlalchemy.orm import Session

from toolroom.core.errors import DuplicateError, NotFoundError
from toolroom.core.logging import get_logger
from toolroom.core.security import hash_password, password_needs_rehash, verify_password
from toolroom.models import (
    AdminPanelPermission,
    CustomMaterial,
    MaterialPriceHistory,
    MaterialSetting,
    SavedCalculation,
    User,
    UserRole,
    UserStatus,
)

logger = get_logger(__name__)


def authenticate_user(
    db: Session,
    username: str,
    password: str,
) -> User | None:
    """
    Look the user up by username and check the password.
    Returns the user when the password matches and the account is active.
    """
    user: User | None = (
        db.query(User)
        .filter(User.username == username.strip())
        .first()
    )

    if user is None:
        logger.info("login_failed", username=username, reason="unknown_user")
        return None

    if user.status != UserStatus.active:
        logger.info("login_failed", username=username, reason="inactive")
        return None

    if not verify_password(password, user.password_hash):
        logger.info("login_failed", username=username, reason="bad_password")
        return None

    if password_needs_rehash(user.password_hash):
        set_user_password(user, password)
        db.add(user)
        db.commit()

    return user


def set_user_password(user: User, plain_password: str) -> None:
    user.password_hash = hash_password(plain_password)


def create_user(
    db: Session,
    *,
    username: str,
    password: str,
    display_name: str | None = None,
    role: UserRole = UserRole.user,
) -> User:
    if db.query(User).filter(User.username == username.strip()).first():
        raise DuplicateError("Bu kullanıcı adı zaten kullanılıyor.")
    user = User(
        username=username.strip(),
        display_name=(display_name or username).strip(),
        role=role,
        status=UserStatus.active,
    )
    set_user_password(user, password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_created", username=user.username, role=user.role.value)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("Kullanıcı bulunamadı.")
    return user


def update_user(
    db: Session,
    user_id: int,
    *,
    username: str | None = None,
    display_name: str | None = None,
    role: UserRole | None = None,
    status: UserStatus | None = None,
) -> User:
    """Change only the fields that were given."""
    user = get_user(db, user_id)

    if username is not None and username.strip() != user.username:
        taken = db.query(User).filter(User.username == username.strip(), User.id != user_id).first()
        if taken:
            raise DuplicateError("Bu kullanıcı adı zaten kullanılıyor.")
        user.username = username.strip()
    if display_name is not None:
        user.display_name = display_name.strip() or user.username
    if role is not None:
        user.role = role
    if status is not None:
        user.status = status

    db.commit()
    db.refresh(user)
    logger.info("user_updated", user_id=user.id, role=user.role.value, status=user.status.value)
    return user


def change_password(db: Session, user_id: int, new_password: str) -> None:
    user = get_user(db, user_id)
    set_user_password(user, new_password)
    db.commit()
    logger.info("user_password_changed", user_id=user_id)


def delete_user(db: Session, user_id: int) -> None:
    """
    Remove the account with its panel permissions and saved calculations.
    Materials and price history it touched stay, with the reference cleared.
    """
    user = get_user(db, user_id)

    db.query(SavedCalculation).filter(SavedCalculation.user_id == user_id).delete(synchronize_session=False)
    db.query(AdminPanelPermission).filter(AdminPanelPermission.user_id == user_id).delete(synchronize_session=False)
    db.query(CustomMaterial).filter(CustomMaterial.user_id == user_id).update(
        {CustomMaterial.user_id: None}, synchronize_session=False
    )
    db.query(MaterialSetting).filter(MaterialSetting.updated_by == user_id).update(
        {MaterialSetting.updated_by: None}, synchronize_session=False
    )
    db.query(MaterialPriceHistory).filter(MaterialPriceHistory.changed_by == user_id).update(
        {MaterialPriceHistory.changed_by: None}, synchronize_session=False
    )
    db.expire(user, ["panel_permissions"])
    db.delete(user)
    db.commit()
    logger.info("user_deleted", user_id=user_id)


def session_payload(user: User) -> dict:
    """Minimal user data kept in the signed session cookie."""
    return {
        "id": user.id,
        "username": user.username,
        "display_name": user.display_name,
        "role": user.role.value if hasattr(user.role, "value") else str(user.role),
    }
