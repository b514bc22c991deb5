"""
Pytest fixtures - per-test SQLite database, service wiring, HTTP client, auth.
"""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from donation_api.core.identity import IdentityResolver
from donation_api.core.security import create_access_token, hash_password
from donation_api.db.base import Base
from donation_api.db.models import Product, User
from donation_api.db.repositories import ProductRepository, UserRepository
from donation_api.db.session import get_db
from donation_api.main import app
from donation_api.services.product_service import ProductService


@pytest_asyncio.fixture
async def engine(tmp_path):
    # A file (not :memory:) so several connections can share it in concurrency tests
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as s:
        yield s


def build_service(session: AsyncSession) -> ProductService:
    return ProductService(ProductRepository(session), IdentityResolver(UserRepository(session)))


@pytest.fixture
def product_service(session: AsyncSession) -> ProductService:
    return build_service(session)


@pytest.fixture
def service_factory():
    return build_service


async def _add_user(session: AsyncSession, email: str, full_name: str) -> User:
    user = User(email=email, hashed_password=hash_password("password123"), full_name=full_name)
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def owner(session: AsyncSession) -> User:
    return await _add_user(session, "donor@example.com", "Donor")


@pytest_asyncio.fixture
async def other_user(session: AsyncSession) -> User:
    return await _add_user(session, "recipient@example.com", "Recipient")


@pytest.fixture
def make_product(product_service: ProductService, owner: User):
    """Create a product through the service; keyword overrides replace defaults."""

    async def _make(**overrides):
        fields = {
            "name": "Wooden chair",
            "description": "Sturdy, some scratches",
            "state": "used",
            "purchased_at": date(2021, 3, 14),
            "images": ["chair-front.jpg", "chair-side.jpg"],
        }
        fields.update(overrides)
        caller_id = fields.pop("caller_id", owner.id)
        return await product_service.create(caller_id, **fields)

    return _make


@pytest_asyncio.fixture
async def orphan_product(session: AsyncSession) -> Product:
    """Product whose owner row does not exist (SQLite does not enforce the FK here)."""
    product = Product(
        name="Lamp",
        description="Desk lamp",
        state="new",
        purchased_at=date(2023, 1, 2),
        images=["lamp.jpg"],
        owner_id=9999,
    )
    return await ProductRepository(session).insert(product)


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(owner: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner.id)}"}


@pytest.fixture
def other_headers(other_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}
