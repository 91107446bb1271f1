# tests/conftest.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sitecopy.db.base import Base
from sitecopy.db.session import build_engine, get_db
from sitecopy.main import app
from sitecopy.models.user import User
from sitecopy.security.jwt import create_access_token
from sitecopy.services.content_cache import content_cache


@pytest.fixture(scope="function")
def engine():
    """
    BD SQLite en memoria, una por prueba. StaticPool comparte la única
    conexión entre el test y el threadpool de TestClient.
    """
    eng = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    # los servicios hacen commit: la limpieza la da el engine descartable
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def _clean_cache():
    content_cache.clear()
    yield
    content_cache.clear()


@pytest.fixture
def client(db: Session):
    """Todos los endpoints usan la misma sesión de la prueba en curso."""
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def _mk_user(db: Session, email: str, role: str, first_name=None, last_name=None) -> User:
    u = User(email=email, role=role, first_name=first_name, last_name=last_name, is_active=True)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture
def admin_user(db: Session) -> User:
    return _mk_user(db, "admin@example.com", "admin", "Claire", "Martin")


@pytest.fixture
def client_user(db: Session) -> User:
    return _mk_user(db, "client@example.com", "client", "Paul", "Durand")


def _bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _bearer(admin_user)


@pytest.fixture
def client_headers(client_user: User) -> dict:
    return _bearer(client_user)
