"""
Product repository - persistence and relation expansion for products.

Expansion loads ``owner``/``receiver`` with ``selectinload`` by foreign key.
A reference whose user row is gone expands to None; the raw ``*_id`` stays set.

Lifecycle transitions are single conditional UPDATEs keyed on ``available``,
so two concurrent callers cannot both win the same transition.
"""

import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from donation_api.db.models.product import Product
from donation_api.db.repositories.base_repository import BaseRepository, storage_errors

_EXPAND = (selectinload(Product.owner), selectinload(Product.receiver))


class ProductRepository(BaseRepository[Product]):
    def __init__(self, session):
        super().__init__(session, Product)

    def _select(self, expand: bool):
        # populate_existing: conditional UPDATEs bypass the identity map, so always reload columns
        stmt = select(Product).execution_options(populate_existing=True)
        if expand:
            stmt = stmt.options(*_EXPAND)
        return stmt

    async def insert(self, product: Product) -> Product:
        return await self.add(product)

    @storage_errors
    async def find_by_id(self, product_id: uuid.UUID, expand: bool = False) -> Product | None:
        result = await self.session.execute(self._select(expand).where(Product.id == product_id))
        return result.scalar_one_or_none()

    @storage_errors
    async def find_page(self, *, skip: int = 0, limit: int = 10, expand: bool = True) -> list[Product]:
        """Newest first. Ties on created_at fall back to id so pages never overlap."""
        result = await self.session.execute(
            self._select(expand)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    @storage_errors
    async def find_all_matching(
        self,
        *,
        owner_id: int | None = None,
        receiver_id: int | None = None,
        expand: bool = True,
    ) -> list[Product]:
        stmt = self._select(expand)
        if owner_id is not None:
            stmt = stmt.where(Product.owner_id == owner_id)
        if receiver_id is not None:
            stmt = stmt.where(Product.receiver_id == receiver_id)
        result = await self.session.execute(stmt.order_by(Product.created_at.desc(), Product.id.desc()))
        return list(result.scalars().all())

    @storage_errors
    async def delete_by_id(self, product_id: uuid.UUID) -> None:
        product = await self.session.get(Product, product_id)
        if product is not None:
            await self.session.delete(product)
            await self.session.flush()

    async def _update_if_available(self, product_id: uuid.UUID, **values) -> bool:
        result = await self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.available.is_(True))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @storage_errors
    async def assign_receiver_if_available(self, product_id: uuid.UUID, receiver_id: int) -> bool:
        """Set receiver only while the product is still available. False if no row matched."""
        return await self._update_if_available(product_id, receiver_id=receiver_id)

    @storage_errors
    async def mark_donated_if_available(self, product_id: uuid.UUID, donated_at: datetime) -> bool:
        """Flip available to False and stamp donated_at in one statement. False if already donated."""
        return await self._update_if_available(product_id, available=False, donated_at=donated_at)
