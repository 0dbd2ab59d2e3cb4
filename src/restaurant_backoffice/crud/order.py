import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.config import settings
from restaurant_backoffice.crud.dish import resolve_dishes
from restaurant_backoffice.crud.user import find_user_by_id, get_user_by_email
from restaurant_backoffice.errors import Conflict, Forbidden, InvalidArgument, InvalidReference, NotFound
from restaurant_backoffice.models import Order, OrderDish, OrderStatusEnum

logger = logging.getLogger(__name__)

StatusLike = Union[OrderStatusEnum, str]

# основной поток; CANCELLED достижим из любого нетерминального статуса
STATUS_FLOW = [
    OrderStatusEnum.PENDING,
    OrderStatusEnum.CONFIRMED,
    OrderStatusEnum.PREPARING,
    OrderStatusEnum.READY,
    OrderStatusEnum.COMPLETED,
]
TERMINAL_STATUSES = {OrderStatusEnum.COMPLETED, OrderStatusEnum.CANCELLED}


def parse_status(status: StatusLike) -> OrderStatusEnum:
    if isinstance(status, OrderStatusEnum):
        return status
    try:
        return OrderStatusEnum(str(status).upper())
    except ValueError:
        raise InvalidArgument(f"Invalid status: {status}", entity="order_status", identifier=status) from None


def can_transition(current: OrderStatusEnum, new: OrderStatusEnum) -> bool:
    """
    Переходы только вперёд по STATUS_FLOW (с пропуском шагов),
    отмена из любого нетерминального статуса, тот же статус допустим.
    """
    if current == new:
        return True
    if current in TERMINAL_STATUSES:
        return False
    if new == OrderStatusEnum.CANCELLED:
        return True
    return STATUS_FLOW.index(new) > STATUS_FLOW.index(current)


def _check_transition(order: Order, new_status: OrderStatusEnum, enforce: Optional[bool]) -> None:
    if enforce is None:
        enforce = settings.ENFORCE_STATUS_TRANSITIONS
    if enforce and not can_transition(order.status, new_status):
        logger.warning("Order %s: rejected transition %s -> %s", order.id, order.status.value, new_status.value)
        raise Conflict(
            f"Order {order.id} cannot move from {order.status.value} to {new_status.value}",
            entity="order",
            identifier=order.id,
        )


def _validate_page(page: int, size: int) -> None:
    if page < 0:
        raise InvalidArgument(f"Page must be zero or positive, got {page}", entity="page", identifier=page)
    if size < 1:
        raise InvalidArgument(f"Page size must be positive, got {size}", entity="size", identifier=size)


async def _build_items(db: AsyncSession, dish_ids: Sequence[int]) -> tuple[List[OrderDish], Decimal]:
    """
    Разрешает блюда одним запросом и собирает позиции заказа.
    Повторяющийся id даёт отдельную позицию и учитывается в сумме столько раз, сколько встречается.
    """
    if not dish_ids:
        raise InvalidArgument("Order must contain at least one dish", entity="order", identifier="dish_ids")

    dishes = await resolve_dishes(db, dish_ids)
    missing = [dish_id for dish_id in dish_ids if dish_id not in dishes]
    if missing:
        raise InvalidReference(
            f"Dishes not found: {sorted(set(missing))}", entity="dish", identifier=missing[0]
        )

    items = [
        OrderDish(dish_id=dish_id, position=position, price=dishes[dish_id].price)
        for position, dish_id in enumerate(dish_ids)
    ]
    total = sum((dishes[dish_id].price for dish_id in dish_ids), Decimal("0"))
    return items, total.quantize(Decimal("0.01"))


async def _reload(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(
        select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_order_by_id(db: AsyncSession, order_id: int) -> Order:
    """
    Возвращает заказ по ID вместе с позициями.
    """
    result = await db.execute(select(Order).where(Order.id == order_id))
    order = result.scalars().first()
    if not order:
        raise NotFound(f"Order with id={order_id} not found", entity="order", identifier=order_id)
    return order


async def get_orders(
    db: AsyncSession,
    status: Optional[StatusLike] = None,
    page: int = 0,
    size: Optional[int] = None,
) -> List[Order]:
    """
    Возвращает страницу заказов с опциональной фильтрацией по статусу.
    Нумерация страниц с нуля.
    """
    size = size if size is not None else settings.DEFAULT_PAGE_SIZE
    _validate_page(page, size)

    stmt = select(Order).order_by(Order.id)
    if status is not None:
        stmt = stmt.where(Order.status == parse_status(status))

    result = await db.execute(stmt.offset(page * size).limit(size))
    return list(result.scalars().all())


async def get_orders_by_owner(
    db: AsyncSession,
    email: str,
    page: int = 0,
    size: Optional[int] = None,
) -> List[Order]:
    """
    Возвращает страницу заказов пользователя по его email.
    """
    size = size if size is not None else settings.DEFAULT_PAGE_SIZE
    _validate_page(page, size)
    owner = await get_user_by_email(db, email)

    result = await db.execute(
        select(Order)
        .where(Order.user_id == owner.id)
        .order_by(Order.id)
        .offset(page * size)
        .limit(size)
    )
    return list(result.scalars().all())


async def create_order(
    db: AsyncSession,
    user_id: int,
    dish_ids: Sequence[int],
    addition: Optional[str] = None,
    status: Optional[StatusLike] = None,
) -> Order:
    """
    Создаёт заказ: проверяет пользователя, разрешает блюда, считает полную стоимость.
    Начальный статус PENDING, если не передан другой (и это разрешено настройками).
    """
    user = await find_user_by_id(db, user_id)
    if not user:
        raise NotFound(f"User with id={user_id} not found", entity="user", identifier=user_id)

    initial_status = OrderStatusEnum.PENDING
    if status is not None:
        initial_status = parse_status(status)
        if initial_status != OrderStatusEnum.PENDING and not settings.ALLOW_INITIAL_STATUS:
            raise Conflict(
                f"New orders must start as PENDING, got {initial_status.value}",
                entity="order_status",
                identifier=initial_status.value,
            )

    items, total = await _build_items(db, dish_ids)

    order = Order(user_id=user.id, addition=addition, status=initial_status, full_price=total, items=items)
    db.add(order)
    await db.commit()

    logger.info("Order %s created for user %s: %d dish(es), full_price=%s", order.id, user.id, len(items), total)
    return await _reload(db, order.id)


async def _apply_update(
    db: AsyncSession,
    order: Order,
    dish_ids: Sequence[int],
    addition: Optional[str],
    status: Optional[StatusLike],
    enforce_transitions: Optional[bool],
) -> Order:
    # все проверки до первой мутации
    new_status = None
    if status is not None:
        new_status = parse_status(status)
        _check_transition(order, new_status, enforce_transitions)

    items, total = await _build_items(db, dish_ids)

    order.items = items
    order.full_price = total
    order.addition = addition
    if new_status is not None:
        order.status = new_status

    await db.commit()

    logger.info("Order %s updated: %d dish(es), full_price=%s", order.id, len(items), total)
    return await _reload(db, order.id)


async def update_order(
    db: AsyncSession,
    order_id: int,
    dish_ids: Sequence[int],
    addition: Optional[str] = None,
    status: Optional[StatusLike] = None,
    enforce_transitions: Optional[bool] = None,
) -> Order:
    """
    Обновляет заказ: заменяет список блюд, пересчитывает стоимость с нуля,
    меняет примечание и (опционально) статус.
    """
    order = await get_order_by_id(db, order_id)
    return await _apply_update(db, order, dish_ids, addition, status, enforce_transitions)


async def update_order_as_owner(
    db: AsyncSession,
    order_id: int,
    dish_ids: Sequence[int],
    acting_email: str,
    addition: Optional[str] = None,
    status: Optional[StatusLike] = None,
    enforce_transitions: Optional[bool] = None,
) -> Order:
    """
    То же, что update_order, но только для владельца заказа.
    """
    order = await get_order_by_id(db, order_id)
    acting_user = await get_user_by_email(db, acting_email)

    if order.user_id != acting_user.id:
        logger.warning("User %s tried to update order %s of another user", acting_email, order_id)
        raise Forbidden(f"User {acting_email} does not own order {order_id}", entity="order", identifier=order_id)

    return await _apply_update(db, order, dish_ids, addition, status, enforce_transitions)


async def update_order_status(
    db: AsyncSession,
    order_id: int,
    status: StatusLike,
    enforce_transitions: Optional[bool] = None,
) -> Order:
    """
    Меняет только статус, состав и стоимость заказа не трогает.
    """
    order = await get_order_by_id(db, order_id)
    new_status = parse_status(status)
    _check_transition(order, new_status, enforce_transitions)

    if order.status == new_status:
        return order

    previous = order.status
    order.status = new_status
    await db.commit()

    logger.info("Order %s status %s -> %s", order.id, previous.value, new_status.value)
    return await _reload(db, order.id)


async def delete_order(db: AsyncSession, order_id: int) -> None:
    """
    Удаляет заказ.
    """
    order = await get_order_by_id(db, order_id)
    await db.delete(order)
    await db.commit()
    logger.info("Order %s deleted", order_id)
