"""
FastAPI dependencies - DB-backed services and bearer-token identity.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from donation_api.core.exceptions import AuthenticationError
from donation_api.core.identity import IdentityResolver
from donation_api.core.security import user_id_from_token
from donation_api.db.repositories.product_repository import ProductRepository
from donation_api.db.repositories.user_repository import UserRepository
from donation_api.db.session import DbSession
from donation_api.services.product_service import ProductService

security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int:
    """Resolve the bearer token to an active user's id. AuthenticationError otherwise."""
    if not credentials:
        raise AuthenticationError("Not authenticated")
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token")
    user = await IdentityResolver(UserRepository(session)).resolve(user_id)
    return user.id


def get_product_service(session: DbSession) -> ProductService:
    """Factory for the service with repository injection."""
    return ProductService(ProductRepository(session), IdentityResolver(UserRepository(session)))


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
