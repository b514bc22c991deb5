"""
User repository - identity lookups for authentication and authorization.
"""

from sqlalchemy import select

from donation_api.db.models.user import User
from donation_api.db.repositories.base_repository import BaseRepository, storage_errors


class UserRepository(BaseRepository[User]):
    def __init__(self, session):
        super().__init__(session, User)

    @storage_errors
    async def get_by_email(self, email: str) -> User | None:
        """Find user by email - used for login and duplicate checks."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
