# toolroom/core/security.py
from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    # Passwords longer than 72 bytes are truncated instead of raising
    bcrypt__truncate_error=False,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def password_needs_rehash(password_hash: str) -> bool:
    return pwd_context.needs_update(password_hash)
