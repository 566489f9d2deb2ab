# scholarship_gate/infrastructure/database/session.py

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from scholarship_gate.config.settings import get_settings

Base = declarative_base()


def _install_sqlite_transaction_hooks(engine: AsyncEngine) -> None:
    """
    Take over BEGIN from the sqlite driver so SAVEPOINT works, and begin IMMEDIATE so
    concurrent writers queue on the busy timeout instead of failing on lock upgrade.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        engine = create_async_engine(database_url, echo=echo)
        _install_sqlite_transaction_hooks(engine)
        return engine
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )


async def init_db(bind: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    # Registers the mapped tables on Base.metadata.
    from scholarship_gate.infrastructure.database import models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


engine = build_engine(get_settings().database_url)

AsyncSessionLocal = build_session_factory(engine)
