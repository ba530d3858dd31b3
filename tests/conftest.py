"""
Test configuration and fixtures for the property service.
Provides a throwaway store per test, test data factories and an HTTP client.
"""

import pytest
import os
import uuid
from decimal import Decimal
from typing import AsyncGenerator, Optional
from httpx import AsyncClient, ASGITransport
from sqlalchemy import update
from sqlalchemy.ext.asyncio import async_sessionmaker

from property_service import database
from property_service.main import app
from property_service.models.user import User, UserRole
from property_service.models.property import Property
from property_service.repositories.user import UserRepository
from property_service.repositories.property import PropertyRepository
from property_service.services.property import PropertyService


# Set to a PostgreSQL URL to run the store tests against a real server
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """
    Fresh store with a ``users`` table and the bootstrapped ``properties`` table.
    """
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'properties.db'}"
    factory = database.init_db_engine(url)

    async with database.engine.begin() as conn:
        await conn.run_sync(Property.__table__.drop, checkfirst=True)
        await conn.run_sync(User.__table__.drop, checkfirst=True)
        await conn.run_sync(User.__table__.create)

    await PropertyService(
        PropertyRepository(factory),
        UserRepository(factory)
    ).setup_database()

    yield factory

    async with database.engine.begin() as conn:
        await conn.run_sync(Property.__table__.drop, checkfirst=True)
        await conn.run_sync(User.__table__.drop, checkfirst=True)
    await database.close_db_connection()


@pytest.fixture
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app and the per-test store."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unconfigured_client(monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with no store configured."""
    await database.close_db_connection()
    monkeypatch.setattr(database.settings, "database_url", None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Repository fixtures
@pytest.fixture
def user_repository(session_factory: async_sessionmaker) -> UserRepository:
    return UserRepository(session_factory)


@pytest.fixture
def property_repository(session_factory: async_sessionmaker) -> PropertyRepository:
    return PropertyRepository(session_factory)


@pytest.fixture
def property_service(
    property_repository: PropertyRepository,
    user_repository: UserRepository
) -> PropertyService:
    return PropertyService(property_repository, user_repository)


# Test data factories
class UserFactory:
    """Factory for creating users in the externally owned table."""

    @staticmethod
    async def create_user(
        session_factory: async_sessionmaker,
        role: Optional[str] = UserRole.LANDLORD.value,
        first_name: str = "Lena",
        last_name: str = "Landlord",
        email: Optional[str] = None
    ) -> User:
        """Insert a user row."""
        user = User(
            role=role,
            first_name=first_name,
            last_name=last_name,
            email=email or f"user{uuid.uuid4().hex[:8]}@example.com"
        )
        async with session_factory() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        landlord_id: int,
        address: str = "123 Main St",
        city: str = "Austin",
        state: str = "TX",
        zip_code: str = "78701",
        **overrides
    ) -> dict:
        """Create property data dictionary with only the required fields set."""
        data = {
            "address": address,
            "city": city,
            "state": state,
            "zip_code": zip_code,
            "landlord_id": landlord_id
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        landlord_id: int,
        address: Optional[str] = None,
        city: str = "Austin",
        state: str = "TX",
        zip_code: str = "78701",
        rent_amount: Optional[Decimal] = Decimal("1500.00"),
        bedrooms: Optional[int] = 2,
        bathrooms: Optional[Decimal] = Decimal("1.0"),
        square_feet: Optional[int] = 900,
        description: Optional[str] = None
    ) -> Property:
        """Create a test property in the store."""
        return await property_repo.create_property({
            "address": address or f"{uuid.uuid4().hex[:6]} Test Ave",
            "city": city,
            "state": state,
            "zip_code": zip_code,
            "rent_amount": rent_amount,
            "bedrooms": bedrooms,
            "bathrooms": bathrooms,
            "square_feet": square_feet,
            "description": description,
            "landlord_id": landlord_id
        })


async def mark_verified(session_factory: async_sessionmaker, property_id: int) -> None:
    """Flip ``landlord_verified`` the way an out-of-band admin process would."""
    async with session_factory() as session:
        await session.execute(
            update(Property).where(Property.id == property_id).values(landlord_verified=True)
        )
        await session.commit()


# Common test fixtures
@pytest.fixture
async def test_landlord(session_factory: async_sessionmaker) -> User:
    """Create a landlord user."""
    return await UserFactory.create_user(
        session_factory,
        first_name="Lena",
        last_name="Landlord",
        email="lena@example.com"
    )


@pytest.fixture
async def test_tenant(session_factory: async_sessionmaker) -> User:
    """Create a user without the landlord role."""
    return await UserFactory.create_user(
        session_factory,
        role="tenant",
        first_name="Tom",
        last_name="Tenant",
        email="tom@example.com"
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_landlord: User) -> Property:
    """Create a test property."""
    return await PropertyFactory.create_property(
        property_repository,
        landlord_id=test_landlord.id,
        address="500 Congress Ave",
        rent_amount=Decimal("2100.00"),
        bedrooms=3,
        bathrooms=Decimal("2.0"),
        square_feet=1400
    )
