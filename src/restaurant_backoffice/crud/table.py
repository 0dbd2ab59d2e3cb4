import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.config import settings
from restaurant_backoffice.crud.user import get_user_by_email, get_user_by_id
from restaurant_backoffice.errors import Conflict, InvalidArgument, NotFound
from restaurant_backoffice.models import DiningTable

logger = logging.getLogger(__name__)


def _validate_table_fields(table_number: int, seats: int) -> None:
    if table_number < 1:
        raise InvalidArgument(
            f"Table number must be positive: {table_number}", entity="table", identifier=table_number
        )
    if seats < 1:
        raise InvalidArgument(f"Seats must be at least 1, got {seats}", entity="table", identifier=table_number)
    if seats > settings.MAX_SEATS:
        raise InvalidArgument(
            f"Seats must not exceed {settings.MAX_SEATS}, got {seats}", entity="table", identifier=table_number
        )


async def _number_taken(db: AsyncSession, table_number: int, exclude_id: Optional[int] = None) -> bool:
    stmt = select(DiningTable.id).where(DiningTable.table_number == table_number)
    if exclude_id is not None:
        stmt = stmt.where(DiningTable.id != exclude_id)
    result = await db.execute(stmt)
    return result.first() is not None


async def _reload(db: AsyncSession, table_id: int) -> DiningTable:
    # условные UPDATE идут мимо identity map, поэтому перечитываем строку
    table = await db.get(DiningTable, table_id, populate_existing=True)
    if not table:
        raise NotFound(f"Table with id={table_id} not found", entity="table", identifier=table_id)
    return table


async def get_table_by_id(db: AsyncSession, table_id: int) -> DiningTable:
    table = await db.get(DiningTable, table_id)
    if not table:
        raise NotFound(f"Table with id={table_id} not found", entity="table", identifier=table_id)
    return table


async def get_tables(db: AsyncSession) -> List[DiningTable]:
    result = await db.execute(select(DiningTable).order_by(DiningTable.table_number))
    return list(result.scalars().all())


async def get_available_tables(db: AsyncSession) -> List[DiningTable]:
    """
    Возвращает свободные столики.
    """
    result = await db.execute(
        select(DiningTable)
        .where(DiningTable.is_reserved.is_(False))
        .order_by(DiningTable.table_number)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def create_table(db: AsyncSession, table_number: int, seats: int) -> DiningTable:
    _validate_table_fields(table_number, seats)

    if await _number_taken(db, table_number):
        raise Conflict(f"Table number {table_number} already exists", entity="table", identifier=table_number)

    table = DiningTable(table_number=table_number, seats=seats, is_reserved=False)
    db.add(table)
    await db.commit()
    await db.refresh(table)

    logger.info("Table %s created (number=%s, seats=%s)", table.id, table.table_number, table.seats)
    return table


async def update_table(
    db: AsyncSession,
    table_id: int,
    table_number: int,
    seats: int,
    is_reserved: bool,
    reserved_by_user_id: Optional[int] = None,
) -> DiningTable:
    """
    Административное обновление столика.
    Может перевести столик в любое состояние брони, минуя reserve/cancel.
    """
    _validate_table_fields(table_number, seats)

    if await _number_taken(db, table_number, exclude_id=table_id):
        raise Conflict(f"Table number {table_number} already exists", entity="table", identifier=table_number)

    # занятый номер проверяется раньше поиска столика: для неизвестного id тоже будет Conflict
    table = await get_table_by_id(db, table_id)

    reserved_by = None
    if is_reserved:
        if reserved_by_user_id is None:
            raise InvalidArgument(
                "reserved_by_user_id is required for a reserved table", entity="table", identifier=table_id
            )
        reserved_by = await get_user_by_id(db, reserved_by_user_id)

    table.table_number = table_number
    table.seats = seats
    table.is_reserved = is_reserved
    if reserved_by:
        table.reserved_by_user_id = reserved_by.id
        table.reserved_at = datetime.now(timezone.utc)
    else:
        table.reserved_by_user_id = None
        table.reserved_at = None

    await db.commit()
    await db.refresh(table)

    logger.info("Table %s updated by admin (reserved=%s)", table.id, table.is_reserved)
    return table


async def delete_table(db: AsyncSession, table_id: int) -> None:
    table = await get_table_by_id(db, table_id)
    await db.delete(table)
    await db.commit()
    logger.info("Table %s deleted", table_id)


async def reserve_table(db: AsyncSession, table_id: int, acting_email: str) -> DiningTable:
    """
    Бронирует столик за пользователем.
    Проверка и установка флага выполняются одним условным UPDATE:
    из параллельных запросов на один столик успешен ровно один.
    """
    await get_table_by_id(db, table_id)

    user = await get_user_by_email(db, acting_email)

    result = await db.execute(
        update(DiningTable)
        .where(DiningTable.id == table_id, DiningTable.is_reserved.is_(False))
        .values(is_reserved=True, reserved_by_user_id=user.id, reserved_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        # UPDATE ничего не записал: закрываем транзакцию без rollback,
        # чтобы не сбрасывать объекты вызывающей сессии
        await db.commit()
        # столик могли удалить между проверкой и UPDATE
        await _reload(db, table_id)
        logger.warning("Table %s is already reserved, rejected reservation by %s", table_id, acting_email)
        raise Conflict(f"Table with id={table_id} is already reserved", entity="table", identifier=table_id)

    await db.commit()

    logger.info("Table %s reserved by user %s", table_id, user.id)
    return await _reload(db, table_id)


async def cancel_reservation(db: AsyncSession, table_id: int) -> DiningTable:
    await get_table_by_id(db, table_id)

    result = await db.execute(
        update(DiningTable)
        .where(DiningTable.id == table_id, DiningTable.is_reserved.is_(True))
        .values(is_reserved=False, reserved_by_user_id=None, reserved_at=None)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await db.commit()
        await _reload(db, table_id)
        logger.warning("Table %s is not reserved, nothing to cancel", table_id)
        raise Conflict(f"Table with id={table_id} is not reserved", entity="table", identifier=table_id)

    await db.commit()

    logger.info("Reservation of table %s cancelled", table_id)
    return await _reload(db, table_id)


async def release_tables_for_user(db: AsyncSession, user_id: int) -> int:
    """
    Снимает все брони пользователя. Не коммитит: вызывается внутри
    транзакции удаления пользователя. Возвращает число освобождённых столиков.
    """
    result = await db.execute(
        update(DiningTable)
        .where(DiningTable.reserved_by_user_id == user_id)
        .values(is_reserved=False, reserved_by_user_id=None, reserved_at=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
