# toolroom/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from toolroom.core.config import get_settings

settings = get_settings()


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out the legacy scheme
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


database_url = normalize_database_url(settings.DATABASE_URL)

connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}

engine = create_engine(
    database_url,
    future=True,
    echo=settings.DATABASE_ECHO,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)
