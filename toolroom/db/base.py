# toolroom/db/base.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for every ORM model."""
    pass

# Import models so Base.metadata registers every table
from toolroom import models  # noqa: E402,F401
