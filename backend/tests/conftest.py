"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool so
all connections share the one database), with the schema created from the
models. The HTTP client shares the test's session through a ``get_db``
override, so service-level fixtures and API calls see the same data.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

import keystay.models  # noqa: F401
from keystay.auth.jwt import create_token_pair
from keystay.auth.passwords import hash_password
from keystay.database import Base, get_db
from keystay.main import app
from keystay.models.booking import Booking
from keystay.models.property import Property
from keystay.models.room import Room
from keystay.models.user import User
from keystay.schemas.booking import AdminBookingCreate, BookingCreate, GuestInfo
from keystay.schemas.property import PropertyCreate
from keystay.schemas.room import RoomCreate
from keystay.services import booking_service, property_service, room_service

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session on the per-test database."""
    session = AsyncSession(bind=test_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def create_user(db_session: AsyncSession, name: str = "Test Owner") -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"owner-{unique}@test.com",
        hashed_password=hash_password("testpass123"),
        name=name,
        is_active=True,
        role="owner",
    )
    db_session.add(user)
    await db_session.flush()
    return user


def headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.role)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await create_user(db_session)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict[str, str]:
    """Return Authorization headers for the test user."""
    return headers_for(test_user)


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await create_user(db_session, name="Other Owner")


@pytest_asyncio.fixture
async def other_auth_headers(other_user: User) -> dict[str, str]:
    return headers_for(other_user)


# ---------------------------------------------------------------------------
# Property, room, booking helpers (service level)
# ---------------------------------------------------------------------------


def guest_info(**overrides) -> GuestInfo:
    data = {
        "first_name": "Somchai",
        "last_name": "Jaidee",
        "email": "somchai@example.com",
        "phone_number": "0812345678",
    }
    data.update(overrides)
    return GuestInfo(**data)


async def _create_booking(
    db_session: AsyncSession,
    room: Room,
    check_in: date = date(2025, 3, 1),
    check_out: date = date(2025, 3, 3),
    admin: bool = False,
) -> Booking:
    """Create a booking through the service; ``admin`` confirms it and issues a code."""
    schema = AdminBookingCreate if admin else BookingCreate
    data = schema(
        property_id=room.property_id,
        room_id=room.id,
        guest=guest_info(),
        check_in=check_in,
        check_out=check_out,
    )
    return await booking_service.create_booking(db_session, data, auto_confirm=admin)


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession, test_user: User) -> Property:
    return await property_service.create_property(
        db_session,
        test_user,
        PropertyCreate(name="Baan Suan Guesthouse", address="12 Moo 3", province="Chiang Mai"),
    )


@pytest_asyncio.fixture
async def test_room(db_session: AsyncSession, test_property: Property) -> Room:
    return await room_service.create_room(
        db_session,
        RoomCreate(
            property_id=test_property.id,
            name="Garden Room",
            room_number="101",
            price=Decimal("500.00"),
        ),
    )


@pytest_asyncio.fixture
async def make_booking(db_session: AsyncSession):
    """Factory: ``await make_booking(room, check_in, check_out, admin=False)``."""

    async def _make(
        room: Room,
        check_in: date = date(2025, 3, 1),
        check_out: date = date(2025, 3, 3),
        admin: bool = False,
    ) -> Booking:
        return await _create_booking(db_session, room, check_in, check_out, admin)

    return _make
