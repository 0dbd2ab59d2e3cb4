import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.errors import Conflict, NotFound
from restaurant_backoffice.models import Order, OrderDish, RoleEnum, User

logger = logging.getLogger(__name__)


async def find_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User:
    user = await find_user_by_id(db, user_id)
    if not user:
        raise NotFound(f"User with id={user_id} not found", entity="user", identifier=user_id)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User:
    user = await find_user_by_email(db, email)
    if not user:
        raise NotFound(f"User with email={email} not found", entity="user", identifier=email)
    return user


async def get_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def create_user(db: AsyncSession, name: str, email: str, role: RoleEnum = RoleEnum.user) -> User:
    if await find_user_by_email(db, email):
        raise Conflict(f"User with email={email} already exists", entity="user", identifier=email)

    user = User(name=name, email=email, role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)

    logger.info("User %s created (%s, role=%s)", user.id, user.email, user.role.value)
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    name: Optional[str] = None,
    email: Optional[str] = None,
    role: Optional[RoleEnum] = None,
) -> User:
    """
    Частичное обновление пользователя. Email должен остаться уникальным.
    """
    user = await get_user_by_id(db, user_id)

    if email is not None and email != user.email:
        if await find_user_by_email(db, email):
            raise Conflict(f"User with email={email} already exists", entity="user", identifier=email)
        user.email = email
    if name is not None:
        user.name = name
    if role is not None:
        user.role = role

    await db.commit()
    await db.refresh(user)

    logger.info("User %s updated", user.id)
    return user


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """
    Удаляет пользователя одной транзакцией:
    - освобождает все его столики;
    - отвязывает его отзывы (user_id = NULL);
    - удаляет его заказы;
    - удаляет саму запись пользователя.
    При любой ошибке откатывается всё.
    """
    # crud.table и crud.review сами импортируют этот модуль
    from restaurant_backoffice.crud import review as review_crud, table as table_crud

    user = await get_user_by_id(db, user_id)

    try:
        released = await table_crud.release_tables_for_user(db, user.id)
        detached = await review_crud.detach_reviews_for_user(db, user.id)
        owned_orders = select(Order.id).where(Order.user_id == user.id)
        await db.execute(
            delete(OrderDish)
            .where(OrderDish.order_id.in_(owned_orders))
            .execution_options(synchronize_session="fetch")
        )
        await db.execute(
            delete(Order).where(Order.user_id == user.id).execution_options(synchronize_session="fetch")
        )
        await db.delete(user)
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Failed to delete user %s, changes rolled back", user_id)
        raise

    logger.info(
        "User %s deleted: released %d table(s), detached %d review(s)", user_id, released, detached
    )


async def ensure_default_admin(db: AsyncSession, email: str, name: str) -> User:
    """
    Создаёт администратора по умолчанию, если его ещё нет.
    Вызывается один раз при старте приложения.
    """
    existing = await find_user_by_email(db, email)
    if existing:
        return existing

    admin = await create_user(db, name=name, email=email, role=RoleEnum.admin)
    logger.info("Default admin provisioned: %s", email)
    return admin
