import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from ppob_api.config import Settings
from ppob_api.main import create_app
from ppob_api.models.product import Product
from ppob_api.models.user import Role, User, UserStatus
from ppob_api.services.password import hash_password
from ppob_api.services.token_service import TokenService


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_SALT_ROUNDS=4,
        DIGIFLAZZ_USERNAME="testuser",
        DIGIFLAZZ_API_KEY="testkey",
        ADMIN_EMAIL=None,
        ADMIN_PASSWORD=None,
    )


@pytest.fixture
def provider():
    """Stand-in for DigiflazzClient; tests set return values or side effects"""
    stub = AsyncMock()
    stub.place_order.return_value = {"data": {"status": "Pending", "message": "Transaksi Pending"}}
    return stub


@pytest.fixture
def app(settings, provider):
    return create_app(settings, digiflazz_client=provider)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def tokens(db, settings):
    return TokenService(db, settings)


@pytest.fixture
def make_user(db):
    def _make(username="budi", role=Role.USER, password="secret123"):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=hash_password(password, 4),
            role=role,
            status=UserStatus.VERIFIED,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user("budi")


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=Role.ADMIN)


@pytest.fixture
def auth_header(tokens):
    def _header(user):
        token = tokens.sign_access({"userId": user.id, "role": user.role})
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture
def product(db):
    p = Product(
        id_provider="TS10",
        name="Pulsa Telkomsel 10.000",
        category="PULSA",
        base_price=10000,
        selling_price=11500,
        profit=1500,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p
