from typing import List

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.crud.table import create_table, get_tables, get_table_by_id, get_available_tables
from restaurant_backoffice.crud.table import update_table, delete_table, reserve_table, cancel_reservation
from restaurant_backoffice.db.session import get_async_session
from restaurant_backoffice.schemas.table import TableCreate, TableRead, TableUpdate


router = APIRouter(prefix="/tables", tags=["tables"])

@router.get("/", response_model=List[TableRead])
async def list_tables(db: AsyncSession = Depends(get_async_session)):
    return await get_tables(db)


@router.get("/available", response_model=List[TableRead])
async def list_available_tables(db: AsyncSession = Depends(get_async_session)):
    """
    Свободные столики.
    """
    return await get_available_tables(db)


@router.get("/{table_id}", response_model=TableRead)
async def get_table(table_id: int, db: AsyncSession = Depends(get_async_session)):
    return await get_table_by_id(db, table_id)


@router.post("/", response_model=TableRead, status_code=201)
async def create_table_endpoint(table_in: TableCreate, db: AsyncSession = Depends(get_async_session)):
    return await create_table(db, table_in.table_number, table_in.seats)


@router.put("/{table_id}", response_model=TableRead)
async def update_table_endpoint(
    table_id: int,
    table_in: TableUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Административное обновление, в том числе принудительная смена брони.
    """
    return await update_table(
        db,
        table_id,
        table_in.table_number,
        table_in.seats,
        table_in.is_reserved,
        table_in.reserved_by_user_id,
    )


@router.post("/{table_id}/reserve", response_model=TableRead)
async def reserve_table_endpoint(
    table_id: int,
    x_user_email: str = Header(..., description="Email текущего пользователя"),
    db: AsyncSession = Depends(get_async_session),
):
    return await reserve_table(db, table_id, x_user_email)


@router.post("/{table_id}/cancel", response_model=TableRead)
async def cancel_reservation_endpoint(table_id: int, db: AsyncSession = Depends(get_async_session)):
    return await cancel_reservation(db, table_id)


@router.delete("/{table_id}", status_code=204)
async def remove_table(table_id: int, db: AsyncSession = Depends(get_async_session)):
    await delete_table(db, table_id)
