"""
Pytest fixtures for testing
"""
import os

os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.infrastructure.db.session import Base, get_db
from app.application.categories import EnsureDefaultCategoriesUseCase
from app.application.wallets import CreateWalletUseCase
from app.auth import hash_password
from app.infrastructure.db.models import User, CategoryModel


@pytest.fixture
def db_engine():
    """In-memory SQLite engine, one connection shared by every session"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def make_user(db: Session, email: str = "user@example.com") -> User:
    user = User(name="Test", email=email, password_hash=hash_password("secret123"))
    db.add(user)
    db.flush()
    EnsureDefaultCategoriesUseCase(db).execute(user.id)
    return user


@pytest.fixture
def sample_user(db_session) -> User:
    """User with the default categories"""
    return make_user(db_session)


@pytest.fixture
def sample_user_id(sample_user) -> int:
    return sample_user.id


@pytest.fixture
def today() -> date:
    return date(2026, 3, 15)


def _category_id(db: Session, user_id: int, name: str) -> int:
    return db.query(CategoryModel).filter(
        CategoryModel.user_id == user_id,
        CategoryModel.name == name,
    ).one().id


@pytest.fixture
def food_id(db_session, sample_user_id) -> int:
    return _category_id(db_session, sample_user_id, "food")


@pytest.fixture
def salary_id(db_session, sample_user_id) -> int:
    return _category_id(db_session, sample_user_id, "salary")


@pytest.fixture
def wallet_id(db_session, sample_user_id) -> int:
    """Bank wallet with 1000.00"""
    return CreateWalletUseCase(db_session).execute(
        user_id=sample_user_id, name="Bank", wallet_type="bank", balance=Decimal("1000"),
    )


# === API ===

@pytest.fixture
def client(db_engine):
    """TestClient bound to the in-memory database"""
    from app.main import app

    SessionLocal = sessionmaker(bind=db_engine)

    def _override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def category_lookup(db_session):
    """name -> id of a user's category"""
    def _lookup(user_id: int, name: str) -> int:
        return _category_id(db_session, user_id, name)
    return _lookup


@pytest.fixture
def register(client):
    """Sign up through the API and return the Authorization header"""
    def _register(email: str = "api@example.com", password: str = "secret123") -> dict:
        resp = client.post(
            "/api/v1/auth/register",
            json={"name": "Api", "email": email, "password": password},
        )
        assert resp.status_code == 201, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return _register


@pytest.fixture
def auth_headers(register) -> dict:
    return register()
