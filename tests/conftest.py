import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.security import create_access_token, hash_password
from fitcoach.db import create_tables, get_db_session
from fitcoach.main import app
from fitcoach.models.coach import Coach, CoachCustomer
from fitcoach.models.user import AuthProvider, User
from fitcoach.services.identity import set_roles


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_maker):
    async def _make(
        email: str,
        *roles: str,
        password: str | None = None,
        is_active: bool = True,
        name: str | None = None,
        **fields,
    ) -> User:
        user = User(
            email=email,
            name=name or email.split("@")[0],
            password_hash=hash_password(password) if password else None,
            is_active=is_active,
            auth_provider=AuthProvider.LOCAL,
            **fields,
        )
        set_roles(user, roles or ["customer"])
        async with session_maker() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
        return user

    return _make


@pytest.fixture
def link_customer(session_maker):
    """Make ``customer`` a customer of the coach profile of ``coach_user``."""

    async def _link(coach_user: User, customer: User) -> Coach:
        async with session_maker() as session:
            result = await session.exec(select(Coach).where(Coach.user_id == coach_user.id))
            coach = result.first()
            if coach is None:
                coach = Coach(user_id=coach_user.id)
                session.add(coach)
            session.add(CoachCustomer(coach_id=coach.id, customer_id=customer.id))
            await session.commit()
            await session.refresh(coach)
        return coach

    return _link


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}

    return _headers
