"""
Test configuration and fixtures for the Spot Booking API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
import uuid
from decimal import Decimal
from typing import AsyncGenerator, Optional
from httpx import AsyncClient, ASGITransport, Response
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.database import get_db, create_tables, enable_sqlite_foreign_keys
from app.models.user import User
from app.models.spot import Spot
from app.models.review import Review
from app.models.image import SpotImage, ReviewImage
from app.repositories.user import UserRepository
from app.repositories.spot import SpotRepository
from app.repositories.review import ReviewRepository
from app.repositories.image import SpotImageRepository, ReviewImageRepository
from app.services.auth import AuthService
from app.services.spot import SpotService
from app.services.review import ReviewService


TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine(tmp_path):
    """File backed SQLite database, fresh for every test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool
    )
    enable_sqlite_foreign_keys(engine)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client; every request gets its own session like in production."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def spot_repository(db_session: AsyncSession) -> SpotRepository:
    return SpotRepository(db_session)


@pytest.fixture
def review_repository(db_session: AsyncSession) -> ReviewRepository:
    return ReviewRepository(db_session)


@pytest.fixture
def spot_image_repository(db_session: AsyncSession) -> SpotImageRepository:
    return SpotImageRepository(db_session)


@pytest.fixture
def review_image_repository(db_session: AsyncSession) -> ReviewImageRepository:
    return ReviewImageRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    return AuthService(db_session)


@pytest.fixture
def spot_service(db_session: AsyncSession) -> SpotService:
    return SpotService(db_session)


@pytest.fixture
def review_service(db_session: AsyncSession) -> ReviewService:
    return ReviewService(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        username: Optional[str] = None,
        email: Optional[str] = None,
        first_name: str = "Test",
        last_name: str = "User",
        password: str = TEST_PASSWORD
    ) -> User:
        """Create a test user in the database."""
        handle = username or f"user{uuid.uuid4().hex[:8]}"
        return await user_repo.create_user({
            "first_name": first_name,
            "last_name": last_name,
            "email": email or f"{handle.lower()}@example.com",
            "username": handle,
            "password": password
        })


class SpotFactory:
    """Factory for creating test spots."""

    @staticmethod
    def create_spot_data(
        name: str = "Test Spot",
        price: Decimal = Decimal("100.00"),
        lat: Decimal = Decimal("37.7645358"),
        lng: Decimal = Decimal("-122.4730327"),
        city: str = "San Francisco"
    ) -> dict:
        """Request body for the spot endpoints."""
        return {
            "address": "123 Disney Lane",
            "city": city,
            "state": "California",
            "country": "United States of America",
            "lat": float(lat),
            "lng": float(lng),
            "name": name,
            "description": "Place where web developers are created",
            "price": float(price)
        }

    @staticmethod
    async def create_spot(
        spot_repo: SpotRepository,
        owner_id: int,
        name: str = "Test Spot",
        price: Decimal = Decimal("100.00"),
        lat: Decimal = Decimal("37.7645358"),
        lng: Decimal = Decimal("-122.4730327"),
        city: str = "San Francisco"
    ) -> Spot:
        """Create a test spot in the database."""
        spot_data = SpotFactory.create_spot_data(name=name, price=price, lat=lat, lng=lng, city=city)
        spot_data.update(owner_id=owner_id, lat=lat, lng=lng, price=price)
        return await spot_repo.create(spot_data)


class ReviewFactory:
    """Factory for creating test reviews and images."""

    @staticmethod
    async def create_review(
        review_repo: ReviewRepository,
        user_id: int,
        spot_id: int,
        stars: float = 4.0,
        review: str = "Lovely stay"
    ) -> Review:
        return await review_repo.create({
            "user_id": user_id,
            "spot_id": spot_id,
            "review": review,
            "stars": stars
        })

    @staticmethod
    async def create_review_image(
        image_repo: ReviewImageRepository,
        review_id: int,
        url: Optional[str] = None
    ) -> ReviewImage:
        return await image_repo.create({
            "review_id": review_id,
            "url": url or f"https://example.com/reviews/{uuid.uuid4().hex}.jpg"
        })

    @staticmethod
    async def create_spot_image(
        image_repo: SpotImageRepository,
        spot_id: int,
        preview: bool = False,
        url: Optional[str] = None
    ) -> SpotImage:
        return await image_repo.add_image(
            spot_id,
            url or f"https://example.com/spots/{uuid.uuid4().hex}.jpg",
            preview
        )


# Common test fixtures
@pytest.fixture
async def test_owner(user_repository: UserRepository) -> User:
    """User who owns the test spot."""
    return await UserFactory.create_user(
        user_repository,
        username="SpotOwner",
        email="owner@test.com",
        first_name="Owen",
        last_name="Host"
    )


@pytest.fixture
async def test_guest(user_repository: UserRepository) -> User:
    """User who reviews other people's spots."""
    return await UserFactory.create_user(
        user_repository,
        username="SpotGuest",
        email="guest@test.com",
        first_name="Gina",
        last_name="Guest"
    )


@pytest.fixture
async def test_spot(spot_repository: SpotRepository, test_owner: User) -> Spot:
    return await SpotFactory.create_spot(spot_repository, owner_id=test_owner.id)


@pytest.fixture
async def test_review(review_repository: ReviewRepository, test_guest: User, test_spot: Spot) -> Review:
    return await ReviewFactory.create_review(
        review_repository,
        user_id=test_guest.id,
        spot_id=test_spot.id,
        stars=4.0
    )


# Utility functions for tests
async def login(client: AsyncClient, user: User, password: str = TEST_PASSWORD) -> Response:
    """Log in through the session endpoint; the client keeps the cookie."""
    response = await client.post(
        "/api/session",
        json={"credential": user.username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response


def assert_error_envelope(data: dict, code: str):
    """Assert that a body follows the common error format."""
    assert data["code"] == code
    assert data["message"]
    assert "timestamp" in data
    assert "requestId" in data
