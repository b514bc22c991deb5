"""
Identity resolution: turn an authenticated caller id into a user record.
"""

from donation_api.core.exceptions import AuthenticationError
from donation_api.db.models.user import User
from donation_api.db.repositories.user_repository import UserRepository


class IdentityResolver:
    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def resolve(self, user_id: int | None) -> User:
        """Return the active user for ``user_id`` or raise AuthenticationError."""
        if user_id is None:
            raise AuthenticationError("Not authenticated")
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive")
        return user
