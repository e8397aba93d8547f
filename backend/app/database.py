from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from app.config import get_settings

settings = get_settings()


def use_immediate_transactions(engine: AsyncEngine) -> AsyncEngine:
    """
    Make every SQLite transaction take the write lock when it begins.

    SQLite ignores SELECT ... FOR UPDATE, so the project row locks taken by
    the services only hold on servers that support them. With BEGIN IMMEDIATE
    a transaction that reads a list and writes it back cannot interleave
    with another writer.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # The driver would otherwise start transactions lazily, before the first write
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine_options = {"echo": settings.debug, "future": True}
if not settings.database_url.startswith("sqlite"):
    engine_options.update(
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 min
        pool_pre_ping=True,  # Verify connection health before use
    )

engine = create_async_engine(settings.database_url, **engine_options)
if settings.database_url.startswith("sqlite"):
    use_immediate_transactions(engine)

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """Initialize database tables."""
    # Register table metadata before create_all
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Dependency returning the session factory services open transactions from.

    Services decide their own transaction boundaries, so they receive the
    factory rather than a request-scoped session. Tests override this.
    """
    return async_session_maker


@asynccontextmanager
async def get_session_context() -> AsyncGenerator[AsyncSession, None]:
    """Context manager for getting async database sessions (for use outside FastAPI)."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
