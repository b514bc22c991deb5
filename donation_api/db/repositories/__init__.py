# Repository pattern: services depend on these, never on raw sessions

from donation_api.db.repositories.product_repository import ProductRepository
from donation_api.db.repositories.user_repository import UserRepository

__all__ = ["UserRepository", "ProductRepository"]
