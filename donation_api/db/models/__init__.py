from donation_api.db.models.product import Product
from donation_api.db.models.user import User

__all__ = ["User", "Product"]
