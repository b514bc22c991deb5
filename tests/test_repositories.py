"""
Repository tests - expansion, conditional transitions, storage failure surfacing.
"""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import JSON, Date, Uuid, bindparam, text
from sqlalchemy.exc import OperationalError

from donation_api.core.exceptions import StorageError
from donation_api.core.identity import IdentityResolver
from donation_api.db.repositories import ProductRepository
from donation_api.db.session import sync_database_url
from donation_api.services.product_service import ProductService


def _broken_session():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    return session


@pytest.mark.asyncio
async def test_driver_failure_surfaces_as_storage_error():
    repo = ProductRepository(_broken_session())
    with pytest.raises(StorageError) as exc_info:
        await repo.find_by_id(uuid.uuid4())
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_service_does_not_downgrade_storage_error():
    svc = ProductService(ProductRepository(_broken_session()), AsyncMock(spec=IdentityResolver))
    with pytest.raises(StorageError):
        await svc.list_products()


@pytest.mark.asyncio
async def test_mark_donated_matches_only_once(session, make_product):
    product = await make_product()
    repo = ProductRepository(session)
    stamp = datetime(2026, 1, 1, tzinfo=timezone.utc)

    assert await repo.mark_donated_if_available(product.id, stamp) is True
    assert await repo.mark_donated_if_available(product.id, datetime.now(timezone.utc)) is False

    stored = await repo.find_by_id(product.id)
    assert stored.available is False
    assert stored.donated_at.replace(tzinfo=None) == stamp.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_assign_receiver_refused_after_donation(session, make_product, other_user):
    product = await make_product()
    repo = ProductRepository(session)
    await repo.mark_donated_if_available(product.id, datetime.now(timezone.utc))

    assert await repo.assign_receiver_if_available(product.id, other_user.id) is False
    assert (await repo.find_by_id(product.id)).receiver_id is None


@pytest.mark.asyncio
async def test_find_all_matching_filters_by_receiver(session, make_product, owner):
    first = await make_product(name="first")
    await make_product(name="second")
    repo = ProductRepository(session)
    await repo.assign_receiver_if_available(first.id, owner.id)

    matches = await repo.find_all_matching(receiver_id=owner.id)
    assert [p.id for p in matches] == [first.id]
    assert matches[0].receiver.id == owner.id


@pytest.mark.asyncio
async def test_row_written_outside_orm_gets_created_at(session, owner, product_service):
    product_id = uuid.uuid4()
    stmt = text(
        "INSERT INTO products (id, name, description, state, purchased_at, images, owner_id, available) "
        "VALUES (:id, 'Kettle', 'Works', 'used', :purchased_at, :images, :owner_id, :available)"
    ).bindparams(
        bindparam("id", type_=Uuid),
        bindparam("purchased_at", type_=Date),
        bindparam("images", type_=JSON),
    )
    await session.execute(
        stmt,
        {"id": product_id, "purchased_at": date(2022, 2, 2), "images": ["kettle.jpg"], "owner_id": owner.id, "available": True},
    )

    product = await product_service.get_by_id(str(product_id))
    assert product.created_at is not None
    assert product.images == ["kettle.jpg"]


@pytest.mark.parametrize(
    "async_url, expected",
    [
        (
            "postgresql+asyncpg://postgres:p%40ss@db:5432/donations",
            "postgresql+psycopg2://postgres:p%40ss@db:5432/donations",
        ),
        ("sqlite+aiosqlite:///./donations.db", "sqlite:///./donations.db"),
        ("postgresql+psycopg2://u:p@db/donations", "postgresql+psycopg2://u:p@db/donations"),
    ],
)
def test_migrations_use_the_blocking_driver_for_the_same_database(async_url, expected):
    assert sync_database_url(async_url) == expected
