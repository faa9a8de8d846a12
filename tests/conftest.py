"""Test fixtures backed by an in-memory SQLite database."""

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import DatabaseManager
from components.core.security import create_identity_token
from components.payment.schemas import PaymentCreate
from components.user.models import Role, User
from components.user.repository import UserRepository
from components.user.schemas import UserCreate
from restapi.router import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_manager() -> AsyncGenerator[DatabaseManager, None]:
    """Fresh database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    manager = DatabaseManager(engine=engine)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def db_session(db_manager: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    async with db_manager.get_db() as session:
        yield session


@pytest.fixture
def app(db_manager: DatabaseManager):
    return create_app(db_manager=db_manager)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def users(db_session: AsyncSession) -> dict[Role, User]:
    """One persisted user per role."""
    repo = UserRepository(db_session)
    created = {}
    for role in Role:
        created[role] = await repo.create(
            UserCreate(
                name=role.value.title(),
                email=f"{role.value}@example.com",
                password="password123",
                role=role,
            )
        )
    return created


def auth_header(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_identity_token(user.id, user.role.value)}"}


@pytest.fixture
def headers(users: dict[Role, User]) -> dict[Role, dict[str, str]]:
    return {role: auth_header(user) for role, user in users.items()}


@pytest.fixture
def payment_data() -> PaymentCreate:
    return PaymentCreate(
        payment_date=date(2024, 10, 1),
        amount=Decimal("100.00"),
        payment_method="card",
        description="Service payment",
        location="x",
    )
