# tests/conftest.py
import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("AI_GATEWAY_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from toolroom.data.menu import ADMIN_PANEL_KEYS
from toolroom.db.base import Base
from toolroom.db.deps import get_db
from toolroom.main import create_app
from toolroom.models import UserRole
from toolroom.services.auth import create_user
from toolroom.services.permission_service import set_permission

ADMIN_PASSWORD = "admin-pass-123"
USER_PASSWORD = "user-pass-123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Session bound to the in-memory test database."""
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_user(db):
    user = create_user(db, username="admin", password=ADMIN_PASSWORD, display_name="Yönetici", role=UserRole.admin)
    for panel_key in ADMIN_PANEL_KEYS:
        set_permission(db, user_id=user.id, panel_key=panel_key, can_view=True, can_edit=True)
    return user


@pytest.fixture
def regular_user(db):
    return create_user(db, username="operator", password=USER_PASSWORD, display_name="Operatör")


@pytest.fixture
def admin_client(client, admin_user):
    response = client.post("/api/auth/login", json={"username": "admin", "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def user_client(client, regular_user):
    response = client.post("/api/auth/login", json={"username": "operator", "password": USER_PASSWORD})
    assert response.status_code == 200
    return client
