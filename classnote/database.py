from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    pass

def build_engine(database_url: str) -> AsyncEngine:
    engine = create_async_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE clauses unless enabled per connection
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    # expire_on_commit=False so committed rows can still be serialized
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.sessionmaker() as session:
        yield session

async def init_db(engine: AsyncEngine):
    # Models must be imported so their tables are registered on Base
    from classnote.models import user, student, weekly_material, learning_record, evaluation  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
