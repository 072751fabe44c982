from collections.abc import AsyncGenerator
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from fitcoach.core.config import get_settings


def _prepare_async_url(url: str) -> tuple[str, dict]:
    """Convert a sync database URL to its async driver form.

    ``postgresql://`` becomes ``postgresql+asyncpg://`` and ``sslmode`` from
    the query string is translated into asyncpg's ``ssl`` connect arg
    (asyncpg does not accept ``sslmode``). ``sqlite://`` becomes
    ``sqlite+aiosqlite://``.

    Returns (url, connect_args) for ``create_async_engine``.
    """
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1), {}

    url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    parsed = urlparse(url)
    params = parse_qs(parsed.query)

    connect_args: dict = {}
    sslmode_values = params.pop("sslmode", None)
    if sslmode_values:
        sslmode = sslmode_values[0]
        if sslmode == "disable":
            connect_args["ssl"] = False
        elif sslmode in ("require", "verify-ca", "verify-full"):
            connect_args["ssl"] = True

    cleaned_query = urlencode(params, doseq=True)
    clean_url = urlunparse(parsed._replace(query=cleaned_query))
    return clean_url, connect_args


_url, _connect_args = _prepare_async_url(get_settings().database_url)

engine = create_async_engine(
    _url,
    echo=get_settings().debug,
    connect_args=_connect_args,
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(bind: AsyncEngine = engine) -> None:
    # Import for side effects: registers every table on SQLModel.metadata
    import fitcoach.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    async with async_session() as session:
        yield session
