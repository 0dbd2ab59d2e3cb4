import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.config import settings
from restaurant_backoffice.errors import Conflict, InvalidArgument, NotFound
from restaurant_backoffice.models import Dish, OrderDish, Review

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "price": Dish.price,
    "name": Dish.name,
}


def _validate_price(price: Decimal, name: Optional[str]) -> Decimal:
    price = Decimal(price)
    if price < 0:
        raise InvalidArgument(f"Dish price must not be negative: {price}", entity="dish", identifier=name)
    return price


async def resolve_dishes(db: AsyncSession, dish_ids: Iterable[int]) -> Dict[int, Dish]:
    """
    Возвращает блюда по набору id одним запросом.
    Отсутствующих id в результате просто нет, исключение не бросается.
    """
    unique_ids = set(dish_ids)
    if not unique_ids:
        return {}

    result = await db.execute(select(Dish).where(Dish.id.in_(unique_ids)))
    return {dish.id: dish for dish in result.scalars().all()}


async def get_dish_by_id(db: AsyncSession, dish_id: int) -> Dish:
    dish = await db.get(Dish, dish_id)
    if not dish:
        raise NotFound(f"Dish with id={dish_id} not found", entity="dish", identifier=dish_id)
    return dish


async def create_dish(
    db: AsyncSession,
    name: str,
    price: Decimal,
    category: Optional[str] = None,
    is_available: bool = True,
) -> Dish:
    price = _validate_price(price, name)

    dish = Dish(name=name, price=price, category=category, is_available=is_available)
    db.add(dish)
    await db.commit()
    await db.refresh(dish)

    logger.info("Dish %s created (%s, price=%s)", dish.id, dish.name, dish.price)
    return dish


async def get_dishes(
    db: AsyncSession,
    category: Optional[str] = None,
    sort_by: Optional[str] = None,
    order: str = "asc",
    page: Optional[int] = None,
    size: Optional[int] = None,
) -> List[Dish]:
    """
    Возвращает блюда меню.
    category: фильтр по категории;
    sort_by: 'price' | 'name', order: 'asc' | 'desc', без sort_by порядок по id;
    page/size: страница с нуля, без page возвращаются все блюда.
    """
    stmt = select(Dish)
    if category:
        stmt = stmt.where(Dish.category == category)

    if sort_by is not None:
        column = SORT_FIELDS.get(sort_by.lower())
        if column is None:
            raise InvalidArgument(f"Unsupported sort field: {sort_by}", entity="dish", identifier=sort_by)
        if order.lower() not in ("asc", "desc"):
            raise InvalidArgument(f"Unsupported sort order: {order}", entity="dish", identifier=order)
        stmt = stmt.order_by(column.desc() if order.lower() == "desc" else column.asc(), Dish.id)
    else:
        stmt = stmt.order_by(Dish.id)

    if page is not None or size is not None:
        page = page or 0
        size = size if size is not None else settings.DEFAULT_PAGE_SIZE
        if page < 0:
            raise InvalidArgument(f"Page must be zero or positive, got {page}", entity="page", identifier=page)
        if size < 1:
            raise InvalidArgument(f"Page size must be positive, got {size}", entity="size", identifier=size)
        stmt = stmt.offset(page * size).limit(size)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_dish(
    db: AsyncSession,
    dish_id: int,
    name: Optional[str] = None,
    price: Optional[Decimal] = None,
    category: Optional[str] = None,
    is_available: Optional[bool] = None,
) -> Dish:
    """
    Частичное обновление: меняются только переданные поля.
    Цена в уже оформленных заказах не меняется, там хранится снимок.
    """
    dish = await get_dish_by_id(db, dish_id)

    if price is not None:
        dish.price = _validate_price(price, name or dish.name)
    if name is not None:
        dish.name = name
    if category is not None:
        dish.category = category
    if is_available is not None:
        dish.is_available = is_available

    await db.commit()
    await db.refresh(dish)

    logger.info("Dish %s updated (price=%s, available=%s)", dish.id, dish.price, dish.is_available)
    return dish


async def delete_dish(db: AsyncSession, dish_id: int) -> None:
    """
    Удаляет блюдо вместе с отзывами о нём.
    Блюдо, которое есть в заказах, удалить нельзя: его стоит снять с продажи (is_available = False).
    """
    dish = await get_dish_by_id(db, dish_id)

    result = await db.execute(select(func.count(OrderDish.id)).where(OrderDish.dish_id == dish_id))
    if result.scalar_one():
        raise Conflict(f"Dish with id={dish_id} is used in orders", entity="dish", identifier=dish_id)

    await db.execute(
        delete(Review).where(Review.dish_id == dish_id).execution_options(synchronize_session="fetch")
    )
    await db.delete(dish)
    await db.commit()
    logger.info("Dish %s deleted", dish_id)
