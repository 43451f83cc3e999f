"""
Test configuration and fixtures for the rental listing API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import io
import pytest
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from rental_api.main import app
from rental_api.database import Base, get_db
from rental_api.models.user import User, UserRole
from rental_api.models.property import Property, PropertyType
from rental_api.repositories.user import UserRepository
from rental_api.repositories.property import PropertyRepository
from rental_api.services.auth import AuthService
from rental_api.services.user import UserService
from rental_api.services.property import PropertyService
from rental_api.services.storage import LocalImageStorage, get_image_storage
from rental_api.utils.auth import create_access_token


# Test database configuration
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Fresh schema for every test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest.fixture
def image_storage(tmp_path) -> LocalImageStorage:
    return LocalImageStorage(str(tmp_path / "uploads"))


@pytest.fixture
async def async_client(db_session: AsyncSession, image_storage: LocalImageStorage) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database session and storage overrides."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    """Create a user repository instance."""
    return UserRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def auth_service(db_session: AsyncSession) -> AuthService:
    """Create an auth service instance."""
    return AuthService(db_session)


@pytest.fixture
def user_service(db_session: AsyncSession) -> UserService:
    return UserService(db_session)


@pytest.fixture
def property_service(db_session: AsyncSession, image_storage: LocalImageStorage) -> PropertyService:
    """Create a property service instance writing uploads to a temporary directory."""
    return PropertyService(db_session, image_storage)


def make_image_bytes(image_format: str = "PNG", size=(8, 8)) -> bytes:
    """Encode a tiny solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


class FakeUpload:
    """Minimal stand-in for an UploadFile as seen by the storage layer."""

    def __init__(self, content: bytes, filename: str = "photo.png", content_type: str = "image/png"):
        self._content = content
        self.filename = filename
        self.content_type = content_type

    async def seek(self, offset: int) -> None:
        return None

    async def read(self) -> bytes:
        return self._content


def png_upload(filename: str = "photo.png") -> FakeUpload:
    return FakeUpload(make_image_bytes("PNG"), filename=filename, content_type="image/png")


def image_files(count: int = 1) -> List[tuple]:
    """Multipart image parts for httpx."""
    return [
        ("images", (f"photo{i}.png", make_image_bytes("PNG"), "image/png"))
        for i in range(count)
    ]


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for a user."""
    token = create_access_token(user_id=user.id, role=user.role)
    return {"Authorization": f"Bearer {token}"}


class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    def create_user_data(
        email: str = "owner@example.com",
        password: str = DEFAULT_PASSWORD,
        name: str = "Test Owner",
        role: UserRole = UserRole.RESIDENTIAL
    ) -> dict:
        """Create user data dictionary."""
        return {
            "email": email,
            "password": password,
            "name": name,
            "role": role
        }

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: str = "owner@example.com",
        password: str = DEFAULT_PASSWORD,
        name: str = "Test Owner",
        role: UserRole = UserRole.RESIDENTIAL
    ) -> User:
        """Create a test user in the database."""
        user_data = UserFactory.create_user_data(
            email=email,
            password=password,
            name=name,
            role=role
        )
        return await user_repo.create_user(user_data)


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(
        created_by_id=None,
        title: str = "2BHK near Metro",
        property_type: PropertyType = PropertyType.RESIDENTIAL,
        location: str = "12 MG Road",
        area: str = "Indiranagar",
        rent: Decimal = Decimal("25000"),
        deposit: Optional[Decimal] = None,
        features: Optional[List[str]] = None,
        images: Optional[List[str]] = None
    ) -> dict:
        """Create property data dictionary."""
        return {
            "title": title,
            "property_type": property_type,
            "location": location,
            "area": area,
            "rent": rent,
            "deposit": deposit,
            "features": features if features is not None else ["Parking"],
            "images": images if images is not None else ["/uploads/sample.png"],
            "created_by_id": created_by_id
        }

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        created_by_id,
        title: str = "2BHK near Metro",
        property_type: PropertyType = PropertyType.RESIDENTIAL,
        location: str = "12 MG Road",
        area: str = "Indiranagar",
        rent: Decimal = Decimal("25000"),
        deposit: Optional[Decimal] = None
    ) -> Property:
        """Create a test property in the database."""
        property_data = PropertyFactory.create_property_data(
            created_by_id=created_by_id,
            title=title,
            property_type=property_type,
            location=location,
            area=area,
            rent=rent,
            deposit=deposit
        )
        return await property_repo.create_property(property_data)


# Common test fixtures
@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    """Create a test admin user."""
    return await UserFactory.create_user(
        user_repository,
        email="admin@example.com",
        name="Test Admin",
        role=UserRole.ADMIN
    )


@pytest.fixture
async def test_residential(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="resi@example.com",
        name="Resi Owner",
        role=UserRole.RESIDENTIAL
    )


@pytest.fixture
async def test_commercial(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(
        user_repository,
        email="shop@example.com",
        name="Shop Owner",
        role=UserRole.COMMERCIAL
    )


@pytest.fixture
async def test_property(property_repository: PropertyRepository, test_residential: User) -> Property:
    """Create a listing owned by the residential user."""
    return await PropertyFactory.create_property(
        property_repository,
        created_by_id=test_residential.id,
        title="Sunny Flat",
        deposit=Decimal("50000")
    )
