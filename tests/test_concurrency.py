"""
Concurrent lifecycle transitions - each caller gets its own session and connection,
so the read-check-write sequences genuinely interleave at the database.
"""

import asyncio
from datetime import date

import pytest

from donation_api.core.exceptions import ConflictError
from donation_api.core.security import hash_password
from donation_api.db.models import Product, User
from donation_api.services.product_service import CONCLUDED_MESSAGE, SCHEDULED_MESSAGE

CONFLICT = "conflict"


async def _seed(session_maker, service_factory):
    async with session_maker() as s:
        owner = User(email="donor@example.com", hashed_password=hash_password("pw"), full_name="Donor")
        s.add(owner)
        await s.flush()
        product = await service_factory(s).create(
            owner.id, "Bookshelf", "Five shelves", "used", date(2019, 9, 9), ["shelf.jpg"]
        )
        await s.commit()
        return owner.id, product.id


async def _attempt(session_maker, service_factory, operation, product_id, caller_id):
    async with session_maker() as s:
        svc = service_factory(s)
        try:
            message = await getattr(svc, operation)(str(product_id), caller_id)
        except ConflictError:
            await s.rollback()
            return CONFLICT
        await s.commit()
        return message


async def _reload(session_maker, product_id) -> Product:
    async with session_maker() as s:
        return await s.get(Product, product_id)


@pytest.mark.asyncio
@pytest.mark.parametrize("callers", [2, 3, 5, 8])
async def test_concurrent_conclusions_flip_the_flag_once(session_maker, service_factory, callers):
    owner_id, product_id = await _seed(session_maker, service_factory)

    results = await asyncio.gather(
        *(_attempt(session_maker, service_factory, "conclude_donation", product_id, owner_id) for _ in range(callers))
    )

    assert results.count(CONCLUDED_MESSAGE) == 1
    assert results.count(CONFLICT) == callers - 1

    product = await _reload(session_maker, product_id)
    assert product.available is False
    assert product.donated_at is not None


@pytest.mark.asyncio
@pytest.mark.parametrize("callers", [2, 5])
async def test_concurrent_schedules_after_conclusion_all_conflict(session_maker, service_factory, callers):
    owner_id, product_id = await _seed(session_maker, service_factory)
    assert await _attempt(session_maker, service_factory, "conclude_donation", product_id, owner_id) == CONCLUDED_MESSAGE

    results = await asyncio.gather(
        *(_attempt(session_maker, service_factory, "schedule", product_id, owner_id) for _ in range(callers))
    )

    assert results == [CONFLICT] * callers
    assert (await _reload(session_maker, product_id)).receiver_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("round_", range(5))
async def test_schedule_racing_conclusion_never_lands_on_donated_product(session_maker, service_factory, round_):
    owner_id, product_id = await _seed(session_maker, service_factory)

    scheduled, concluded = await asyncio.gather(
        _attempt(session_maker, service_factory, "schedule", product_id, owner_id),
        _attempt(session_maker, service_factory, "conclude_donation", product_id, owner_id),
    )

    assert concluded == CONCLUDED_MESSAGE
    product = await _reload(session_maker, product_id)
    # A receiver can only be present if scheduling won while the product was still available
    assert (product.receiver_id is not None) == (scheduled == SCHEDULED_MESSAGE)
    assert product.available is False
