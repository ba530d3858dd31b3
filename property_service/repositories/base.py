"""
Base repository class with common operations using async SQLAlchemy.
Repositories hold the shared session factory and open one short-lived
session per operation, so independent queries can run concurrently.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select
from property_service.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common lookups and inserts.
    """

    def __init__(self, model: Type[ModelType], session_factory: async_sessionmaker):
        """
        Initialize repository with model class and session factory.

        Args:
            model: SQLAlchemy model class
            session_factory: Factory producing async sessions
        """
        self.model = model
        self.session_factory = session_factory

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance with store-generated columns loaded

        Raises:
            Exception: If database operation fails
        """
        async with self.session() as session:
            try:
                db_obj = self.model(**obj_in)
                session.add(db_obj)
                await session.commit()
                await session.refresh(db_obj)
                logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
                return db_obj
            except Exception as e:
                await session.rollback()
                logger.error(f"Failed to create {self.model.__name__}: {e}")
                raise

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Args:
            id: Primary key of the record to retrieve

        Returns:
            Model instance if found, None otherwise
        """
        async with self.session() as session:
            try:
                result = await session.execute(select(self.model).where(self.model.id == id))
                obj = result.scalar_one_or_none()

                if obj:
                    logger.debug(f"Retrieved {self.model.__name__} with id: {id}")
                else:
                    logger.debug(f"{self.model.__name__} with id {id} not found")

                return obj
            except Exception as e:
                logger.error(f"Failed to get {self.model.__name__} by id {id}: {e}")
                raise
