from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from restaurant_backoffice.config import settings

# Асинхронный движок
engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, future=True)

# Фабрика сессий
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# Зависимость для FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Использовать в Depends(get_async_session)
    Пример: async def endpoint(db: AsyncSession = Depends(get_async_session))
    """
    async with AsyncSessionLocal() as session:
        yield session
