# tests/conftest.py
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["SECRET_KEY"] = "test-secret"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api.deps import get_change_feed
from storefront.data.database import Base, get_db
from storefront.data.models import CategoryModel, ProductModel, ProfileModel
from storefront.main import create_app
from storefront.services.auth_service import hash_password, create_access_token

# one shared in-memory database for the app and the test helpers
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)

SHIPPING = {
    "name": "Asha Menon",
    "phone": "9876543210",
    "address": "12 Beach Road, Kochi",
    "pincode": "682001",
}


class FakeFeed:
    """Records published changes; listen() replays `pending`."""

    def __init__(self):
        self.events = []
        self.pending = []

    def publish(self, table, event, record_id=None):
        self.events.append((table, event, record_id))
        return True

    async def listen(self):
        for event in list(self.pending):
            yield event


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def feed():
    return FakeFeed()


@pytest.fixture
def client(db_session, feed):
    app = create_app(create_tables=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_change_feed] = lambda: feed

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_category(db_session):
    def _make(name="Coconut Oil", slug="coconut-oil"):
        category = CategoryModel(name=name, slug=slug)
        db_session.add(category)
        db_session.commit()
        return category

    return _make


@pytest.fixture
def make_product(db_session, make_category):
    default_category = {}

    def _make(name="Virgin Coconut Oil", price="310.00", stock=20, category=None, **kwargs):
        if category is None:
            if "category" not in default_category:
                default_category["category"] = make_category()
            category = default_category["category"]

        product = ProductModel(
            name=name,
            price=Decimal(price),
            stock=stock,
            category_id=category.id,
            is_active=kwargs.pop("is_active", True),
            is_featured=kwargs.pop("is_featured", False),
            **kwargs,
        )
        db_session.add(product)
        db_session.commit()
        return product

    return _make


@pytest.fixture
def make_user(db_session):
    def _make(email="asha@example.com", role="customer", full_name="Asha Menon"):
        profile = ProfileModel(
            email=email,
            password_hash=PASSWORD_HASH,
            full_name=full_name,
            role=role,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return _make


def auth_headers(profile) -> dict:
    return {"Authorization": f"Bearer {create_access_token(profile)}"}


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role="admin", full_name="Admin User")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)
