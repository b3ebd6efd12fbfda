import os
import tempfile

# Настройки должны быть заданы до импорта приложения
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_TYPE", "local")
os.environ.setdefault("STORAGE_PATH", tempfile.mkdtemp(prefix="veneer-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from veneer_inventory.core.auth import AuthService
from veneer_inventory.db.database import get_db
from veneer_inventory.db.models import Base, User
from veneer_inventory.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

PASSWORD = "admin123"
PASSWORD_HASH = AuthService.get_password_hash(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    user = User(username="admin", hashed_password=PASSWORD_HASH, is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def token(user):
    return AuthService.create_access_token({"sub": str(user.id)})


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api(client, auth_headers):
    """Клиент с заголовком авторизации по умолчанию."""
    client.headers.update(auth_headers)
    return client


@pytest.fixture
def teak(api):
    """Категория Teak -> подкатегория Teak Quarter -> товар TQ-001."""
    category = api.post("/api/v1/categories", json={"name": "Teak"}).json()
    sub_category = api.post(
        "/api/v1/subcategories", json={"name": "Teak Quarter", "category_id": category["id"]}
    ).json()
    product = api.post(
        "/api/v1/products",
        json={
            "name": "TQ-001",
            "sub_category_id": sub_category["id"],
            "qty": 50,
            "price": 150,
            "billing": 100,
        },
    ).json()
    return {"category": category, "sub_category": sub_category, "product": product}
