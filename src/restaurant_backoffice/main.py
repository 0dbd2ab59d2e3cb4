import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import health, users
from .api.errors import register_error_handlers
from .api.routes.dishes import router as dishes_router
from .api.routes.orders import router as orders_router
from .api.routes.reviews import router as reviews_router
from .api.routes.tables import router as tables_router
from .config import settings, setup_logging
from .crud.user import ensure_default_admin
from .db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # схема создаётся миграциями alembic, здесь только начальные данные
    async with AsyncSessionLocal() as session:
        await ensure_default_admin(session, settings.DEFAULT_ADMIN_EMAIL, settings.DEFAULT_ADMIN_NAME)

    logger.info("🚀 Application started")
    yield
    logger.info("🛑 Application stopped")


app = FastAPI(title="Restaurant Back-Office", lifespan=lifespan)

register_error_handlers(app)

# Подключаем роуты
app.include_router(health.router)
app.include_router(users.router)
app.include_router(orders_router)
app.include_router(tables_router)
app.include_router(dishes_router)
app.include_router(reviews_router)
