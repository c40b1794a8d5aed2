from collections.abc import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from salon_booking.core.config import settings

# libpq-only query params that asyncpg rejects
_LIBPQ_PARAMS = ("sslmode", "channel_binding")


def to_async_url(url: str) -> str:
    """postgresql://... -> postgresql+asyncpg://... without libpq-only params.

    Other backends are returned as given.
    """
    parsed = make_url(url)
    if parsed.get_backend_name() not in ("postgres", "postgresql"):
        return url
    parsed = parsed.set(drivername="postgresql+asyncpg").difference_update_query(_LIBPQ_PARAMS)
    return parsed.render_as_string(hide_password=False)


engine = create_async_engine(
    to_async_url(settings.database_url),
    echo=settings.env == "development",
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
    connect_args={"ssl": True} if settings.database_ssl else {},
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; anything left uncommitted is rolled back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
