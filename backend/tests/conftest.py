"""
Pytest configuration and shared fixtures for the Storefront Admin tests.

Provides an in-memory SQLite session, an httpx client bound to the FastAPI
app (same event loop, same session), JWT headers, a sample catalog, and a
helper that signs webhook bodies the way Stripe does.
"""
import os, sys
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import hashlib
import hmac
import json
import time
from typing import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from database import Base, get_db
from config import settings

# ── Test Configuration ───────────────────────────────────────────────
# Set test-only values for settings that would normally come from .env
WEBHOOK_SECRET = "whsec_test_secret_for_pytest_only"
settings.stripe_webhook_secret = WEBHOOK_SECRET
if not settings.jwt_secret:
    settings.jwt_secret = "test-jwt-secret-for-pytest-only"

OWNER_ID = "user_owner_123"
OTHER_USER_ID = "user_other_456"


# ── Database Fixtures ────────────────────────────────────────────────


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create an in-memory SQLite database session for each test.

    Uses StaticPool to allow in-memory SQLite with async SQLAlchemy.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client for the app with the test DB session injected.

    Runs in the test's event loop, so routes and assertions share one session.
    """
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


# ── Auth Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def owner_headers() -> dict:
    from middleware.auth import issue_access_token
    return {"Authorization": f"Bearer {issue_access_token(user_id=OWNER_ID)}"}


@pytest.fixture
def other_headers() -> dict:
    from middleware.auth import issue_access_token
    return {"Authorization": f"Bearer {issue_access_token(user_id=OTHER_USER_ID)}"}


# ── Test Data Fixtures ────────────────────────────────────────────────


@pytest.fixture
async def sample_store(db_session: AsyncSession):
    from db_models import Store

    store = Store(name="Test Store", user_id=OWNER_ID)
    db_session.add(store)
    await db_session.commit()
    await db_session.refresh(store)
    return store


@pytest.fixture
async def sample_billboard(db_session: AsyncSession, sample_store):
    from db_models import Billboard

    billboard = Billboard(store_id=sample_store.id, label="Summer Sale", image_url="https://img.test/summer.png")
    db_session.add(billboard)
    await db_session.commit()
    await db_session.refresh(billboard)
    return billboard


@pytest.fixture
async def sample_category(db_session: AsyncSession, sample_store, sample_billboard):
    from db_models import Category

    category = Category(store_id=sample_store.id, billboard_id=sample_billboard.id, name="Shirts")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest.fixture
async def sample_products(db_session: AsyncSession, sample_store, sample_category):
    """Two live products and one archived one."""
    from db_models import Product

    products = [
        Product(store_id=sample_store.id, category_id=sample_category.id, name="Red Shirt", price=19.99, is_featured=True),
        Product(store_id=sample_store.id, category_id=sample_category.id, name="Blue Shirt", price=25.0),
        Product(store_id=sample_store.id, category_id=sample_category.id, name="Old Shirt", price=5.0, is_archived=True),
    ]
    db_session.add_all(products)
    await db_session.commit()
    for p in products:
        await db_session.refresh(p)
    return products


@pytest.fixture
async def sample_order(db_session: AsyncSession, sample_store, sample_products):
    """Unpaid order for the two live products."""
    from db_models import Order, OrderItem

    order = Order(store_id=sample_store.id, is_paid=False)
    db_session.add(order)
    await db_session.flush()
    for product in sample_products[:2]:
        db_session.add(OrderItem(order_id=order.id, product_id=product.id))
    await db_session.commit()
    await db_session.refresh(order)
    return order


# ── Webhook Helpers ──────────────────────────────────────────────────


def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header value: t=<ts>,v1=<hmac_sha256("<ts>.<body>")>."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def checkout_completed_payload(
    order_id: str | None,
    *,
    event_id: str = "evt_test_1",
    address: dict | None = None,
    phone: str | None = "+1 555 0100",
) -> bytes:
    metadata = {"orderId": order_id} if order_id is not None else {}
    event = {
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "object": "checkout.session",
                "metadata": metadata,
                "customer_details": {
                    "email": "buyer@example.com",
                    "phone": phone,
                    "address": address,
                },
            }
        },
    }
    return json.dumps(event).encode("utf-8")


@pytest.fixture
def sign() -> Callable[..., str]:
    return stripe_signature
