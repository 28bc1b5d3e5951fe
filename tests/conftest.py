"""
Shared fixtures.

The app is driven through httpx's ASGITransport, which does not run the
lifespan, so the database, payment gateway and notifier dependencies are
overridden here: in-memory SQLite, a RazorpayGateway over a MagicMock SDK
client, and a notifier that records what was dispatched.
"""
import os

# Must be set before filemyrti_api reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "test_secret")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-that-is-long-enough-000")
os.environ.setdefault("ENVIRONMENT", "test")

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import filemyrti_api.models  # noqa: F401
from filemyrti_api.database import Base, get_db
from filemyrti_api.core.dependencies import get_notifier, get_payment_gateway
from filemyrti_api.core.security import create_access_token, hash_password
from filemyrti_api.models.service import Service
from filemyrti_api.models.state import State
from filemyrti_api.models.user import User
from filemyrti_api.services.payment_gateway import RazorpayGateway
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingNotifier:
    def __init__(self):
        self.dispatched = []

    def dispatch(self, form_type, form_data):
        self.dispatched.append((form_type, dict(form_data)))
        return True


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sdk_client():
    return MagicMock()


@pytest.fixture
def gateway(sdk_client):
    return RazorpayGateway("rzp_test_key", "test_secret", client=sdk_client)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def test_app(db_session, gateway, notifier):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as c:
        yield c


@pytest.fixture
def service(db_session):
    service = Service(
        name="Seamless Online Filing",
        slug="seamless-online-filing",
        price=Decimal("699.00"),
        original_price=Decimal("4999.00"),
    )
    db_session.add(service)
    db_session.commit()
    db_session.refresh(service)
    return service


@pytest.fixture
def state(db_session):
    state = State(name="Telangana", slug="telangana", rti_portal_url="https://rti.telangana.gov.in")
    db_session.add(state)
    db_session.commit()
    db_session.refresh(state)
    return state


def _make_user(db_session, email, role):
    user = User(name=email.split("@")[0].title(), email=email, password=hash_password("Secret123"), role=role)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def regular_user(db_session):
    return _make_user(db_session, "ravi@example.com", "user")


@pytest.fixture
def admin_user(db_session):
    return _make_user(db_session, "admin@filemyrti.com", "admin")


def auth_headers(user):
    token = create_access_token({"id": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(regular_user):
    return auth_headers(regular_user)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def application_body(service, state):
    return {
        "service_id": service.id,
        "state_id": state.id,
        "full_name": "Ravi Kumar",
        "mobile": "9876543210",
        "email": "Ravi@Example.com",
        "rti_query": "Copies of the tender documents for road repair in Ward 12",
        "address": "12, MG Road, Indiranagar, Bengaluru",
        "pincode": "560038",
        "payment_id": "pay_Nx1qk0fU3b2Xy9",
        "order_id": "order_Nx1pQ8nF0aL2mT",
    }
