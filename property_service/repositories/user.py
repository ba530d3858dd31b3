"""
User repository for landlord lookups against the externally owned users table.
"""

from sqlalchemy.ext.asyncio import async_sessionmaker
from property_service.repositories.base import BaseRepository
from property_service.models.user import User
from typing import Optional


class UserRepository(BaseRepository[User]):
    """Read-only access to user accounts."""

    def __init__(self, session_factory: async_sessionmaker):
        super().__init__(User, session_factory)

    async def get_landlord_candidate(self, user_id: int) -> Optional[User]:
        """Fetch the user referenced by a listing's landlord_id, whatever its role."""
        return await self.get_by_id(user_id)
