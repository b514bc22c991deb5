"""
Product service - the donation lifecycle (create -> list -> schedule -> conclude).

All input validation and invariant checks happen here; the repository only
persists. Errors are raised as the specific ``DomainError`` subclass at the
point of detection and are never downgraded. Every mutating operation
commits before it returns; a failed commit surfaces as StorageError.

``schedule`` and ``conclude_donation`` check state up front for a clear
error, then rely on the repository's conditional UPDATE to make the
transition itself race-free: whoever loses the race gets ConflictError.
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import date, datetime, timezone

from donation_api.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from donation_api.core.identity import IdentityResolver
from donation_api.db.models.product import Product
from donation_api.db.repositories.product_repository import ProductRepository
from donation_api.schemas.product import ProductResponse, ProductUpdate
from donation_api.schemas.user import UserPublic
from donation_api.services.metrics import LIFECYCLE_REJECTIONS, LIFECYCLE_TRANSITIONS

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

SCHEDULED_MESSAGE = "Pickup scheduled successfully, contact the user."
CONCLUDED_MESSAGE = "Donation concluded successfully."
NOT_OWNER_MESSAGE = "User is not the owner of the product."

# (field, message) in the order they are checked on creation
_CREATE_REQUIRED = (
    ("name", "Name is required."),
    ("description", "Description is required."),
    ("state", "State is required."),
    ("purchased_at", "Purchase date is required."),
    ("images", "At least one image is required."),
)
_UPDATE_FIELDS = ("name", "description", "state", "purchased_at", "images")


def parse_product_id(product_id: str | uuid.UUID) -> uuid.UUID:
    """Validate id format without touching storage. Only the 36-char dashed form is accepted."""
    if isinstance(product_id, uuid.UUID):
        return product_id
    raw = str(product_id)
    try:
        parsed = uuid.UUID(raw)
    except ValueError:
        raise ValidationError("Invalid product id.") from None
    # uuid.UUID also takes braces, urn:uuid: and bare hex
    if str(parsed) != raw.lower():
        raise ValidationError("Invalid product id.")
    return parsed


def _user_to_public(user) -> UserPublic | None:
    return UserPublic.model_validate(user) if user is not None else None


def _product_to_response(product: Product) -> ProductResponse:
    """Map an expanded product to the API shape. Missing relation targets stay None."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        state=product.state,
        purchased_at=product.purchased_at,
        images=list(product.images),
        available=product.available,
        donated_at=product.donated_at,
        created_at=product.created_at,
        updated_at=product.updated_at,
        owner_id=product.owner_id,
        receiver_id=product.receiver_id,
        owner=_user_to_public(product.owner),
        receiver=_user_to_public(product.receiver),
    )


class ProductService:
    """Handles every product use case and enforces the ownership/availability rules."""

    def __init__(self, product_repo: ProductRepository, identity: IdentityResolver):
        self.product_repo = product_repo
        self.identity = identity

    async def _load(self, product_id: uuid.UUID, expand: bool = False) -> Product:
        product = await self.product_repo.find_by_id(product_id, expand=expand)
        if product is None:
            raise NotFoundError("Product not found.")
        return product

    async def _load_expanded(self, product_id: uuid.UUID) -> ProductResponse:
        return _product_to_response(await self._load(product_id, expand=True))

    async def create(
        self,
        caller_id: int | None,
        name: str | None,
        description: str | None,
        state: str | None,
        purchased_at: date | None,
        images: Sequence[str] | None,
    ) -> ProductResponse:
        """Validate, resolve the donor, and persist a new available product."""
        values = {
            "name": name,
            "description": description,
            "state": state,
            "purchased_at": purchased_at,
            "images": images,
        }
        for field, message in _CREATE_REQUIRED:
            if not values[field]:
                raise ValidationError(message, status_code=422)

        owner = await self.identity.resolve(caller_id)

        product = Product(
            name=name,
            description=description,
            state=state,
            purchased_at=purchased_at,
            images=list(images),
            owner_id=owner.id,
            available=True,
            receiver_id=None,
            donated_at=None,
        )
        product = await self.product_repo.insert(product)
        await self.product_repo.commit()
        LIFECYCLE_TRANSITIONS.labels(transition="created").inc()
        logger.info("product %s created by user %s", product.id, owner.id)
        return await self._load_expanded(product.id)

    async def list_products(
        self, page: int | None = DEFAULT_PAGE, page_size: int | None = DEFAULT_PAGE_SIZE
    ) -> list[ProductResponse]:
        """Newest first, ``page_size`` per page. Pages past the end are empty."""
        page = max(page or DEFAULT_PAGE, 1)
        page_size = max(page_size or DEFAULT_PAGE_SIZE, 1)
        products = await self.product_repo.find_page(skip=(page - 1) * page_size, limit=page_size, expand=True)
        return [_product_to_response(p) for p in products]

    async def get_by_id(self, product_id: str | uuid.UUID) -> ProductResponse:
        return await self._load_expanded(parse_product_id(product_id))

    async def update(self, product_id: str | uuid.UUID, data: ProductUpdate) -> ProductResponse:
        """Replace the five descriptive fields. Lifecycle fields are never touched here."""
        pid = parse_product_id(product_id)
        if any(not getattr(data, field) for field in _UPDATE_FIELDS):
            raise ValidationError("All fields are required.")

        product = await self._load(pid)
        product.name = data.name
        product.description = data.description
        product.state = data.state
        product.purchased_at = data.purchased_at
        product.images = list(data.images)
        await self.product_repo.save(product)
        await self.product_repo.commit()
        logger.info("product %s updated", pid)
        return await self._load_expanded(pid)

    async def delete(self, product_id: str | uuid.UUID) -> None:
        """Administrative delete: no ownership or state precondition."""
        pid = parse_product_id(product_id)
        await self._load(pid)
        await self.product_repo.delete_by_id(pid)
        await self.product_repo.commit()
        LIFECYCLE_TRANSITIONS.labels(transition="deleted").inc()
        logger.info("product %s deleted", pid)

    async def list_by_owner(self, owner_id: int) -> list[ProductResponse]:
        products = await self.product_repo.find_all_matching(owner_id=owner_id, expand=True)
        return [_product_to_response(p) for p in products]

    async def list_by_receiver(self, receiver_id: int) -> list[ProductResponse]:
        """May be empty; that is a normal result, not a failure."""
        products = await self.product_repo.find_all_matching(receiver_id=receiver_id, expand=True)
        return [_product_to_response(p) for p in products]

    async def _authorize_transition(
        self, product_id: str | uuid.UUID, caller_id: int | None, transition: str, unavailable_message: str
    ) -> tuple[uuid.UUID, int]:
        """Shared guard for schedule/conclude: format, existence, availability, ownership."""
        pid = parse_product_id(product_id)
        product = await self._load(pid)
        if not product.available:
            LIFECYCLE_REJECTIONS.labels(transition=transition, reason="unavailable").inc()
            logger.warning("%s refused for product %s: not available", transition, pid)
            raise ConflictError(unavailable_message)

        caller = await self.identity.resolve(caller_id)
        # Authorization is always against the owner, never the receiver
        if product.owner_id != caller.id:
            LIFECYCLE_REJECTIONS.labels(transition=transition, reason="forbidden").inc()
            logger.warning("%s refused for product %s: user %s is not the owner", transition, pid, caller.id)
            raise ForbiddenError(NOT_OWNER_MESSAGE)
        return pid, caller.id

    def _lost_race(self, transition: str, pid: uuid.UUID, message: str) -> ConflictError:
        LIFECYCLE_REJECTIONS.labels(transition=transition, reason="unavailable").inc()
        logger.warning("%s lost race for product %s", transition, pid)
        return ConflictError(message)

    async def schedule(self, product_id: str | uuid.UUID, caller_id: int | None) -> str:
        """Assign the caller as receiver of an available product."""
        message = "Product is not available for scheduling."
        pid, user_id = await self._authorize_transition(product_id, caller_id, "scheduled", message)
        if not await self.product_repo.assign_receiver_if_available(pid, user_id):
            raise self._lost_race("scheduled", pid, message)
        await self.product_repo.commit()
        LIFECYCLE_TRANSITIONS.labels(transition="scheduled").inc()
        logger.info("product %s scheduled, receiver %s", pid, user_id)
        return SCHEDULED_MESSAGE

    async def conclude_donation(self, product_id: str | uuid.UUID, caller_id: int | None) -> str:
        """Terminal transition: available -> False, donated_at stamped once."""
        message = "Product is not available to conclude the donation."
        pid, user_id = await self._authorize_transition(product_id, caller_id, "concluded", message)
        donated_at = datetime.now(timezone.utc)
        if not await self.product_repo.mark_donated_if_available(pid, donated_at):
            raise self._lost_race("concluded", pid, message)
        await self.product_repo.commit()
        LIFECYCLE_TRANSITIONS.labels(transition="concluded").inc()
        logger.info("product %s donated by user %s at %s", pid, user_id, donated_at.isoformat())
        return CONCLUDED_MESSAGE
