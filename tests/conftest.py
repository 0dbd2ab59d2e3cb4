import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from restaurant_backoffice.crud.dish import create_dish
from restaurant_backoffice.crud.user import create_user
from restaurant_backoffice.db.base import Base
import restaurant_backoffice.models  # noqa: F401


@pytest.fixture
async def engine(tmp_path):
    # файловая база: параллельным сессиям нужны отдельные соединения
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'backoffice.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def alice(db):
    return await create_user(db, "Alice", "alice@example.com")


@pytest.fixture
async def bob(db):
    return await create_user(db, "Bob", "bob@example.com")


@pytest.fixture
async def soup(db):
    return await create_dish(db, "Borscht", Decimal("50.00"), category="soups")


@pytest.fixture
async def salad(db):
    return await create_dish(db, "Olivier", Decimal("30.00"), category="salads")
