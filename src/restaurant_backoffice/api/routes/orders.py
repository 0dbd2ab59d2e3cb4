from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.crud.order import create_order, get_orders, get_order_by_id, get_orders_by_owner
from restaurant_backoffice.crud.order import update_order, update_order_as_owner, update_order_status, delete_order
from restaurant_backoffice.db.session import get_async_session
from restaurant_backoffice.schemas.order import OrderCreate, OrderRead, OrderStatusUpdate, OrderUpdate


router = APIRouter(prefix="/orders", tags=["orders"])

@router.get("/", response_model=List[OrderRead])
async def list_orders(
    status: Optional[str] = Query(None, description="Фильтр по статусу"),
    page: int = Query(0, description="Номер страницы, с нуля"),
    size: Optional[int] = Query(None, description="Размер страницы"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает список заказов.
    Поддерживает фильтрацию по статусу и пагинацию.
    """
    return await get_orders(db, status=status, page=page, size=size)


@router.get("/my", response_model=List[OrderRead])
async def list_my_orders(
    x_user_email: str = Header(..., description="Email текущего пользователя"),
    page: int = Query(0, description="Номер страницы, с нуля"),
    size: Optional[int] = Query(None, description="Размер страницы"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает заказы текущего пользователя.
    """
    return await get_orders_by_owner(db, x_user_email, page=page, size=size)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int = Path(..., description="ID заказа"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Возвращает заказ по id.
    """
    return await get_order_by_id(db, order_id)


@router.post("/", response_model=OrderRead, status_code=201)
async def create_order_endpoint(order_in: OrderCreate, db: AsyncSession = Depends(get_async_session)):
    """
    Возвращает созданный заказ.
    """
    return await create_order(
        db,
        user_id=order_in.user_id,
        dish_ids=order_in.dish_ids,
        addition=order_in.addition,
        status=order_in.status,
    )


@router.put("/{order_id}", response_model=OrderRead)
async def update_order_endpoint(
    order_id: int,
    order_in: OrderUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Полное обновление заказа (администратор): состав, примечание, статус.
    """
    return await update_order(db, order_id, order_in.dish_ids, addition=order_in.addition, status=order_in.status)


@router.put("/{order_id}/my", response_model=OrderRead)
async def update_my_order_endpoint(
    order_id: int,
    order_in: OrderUpdate,
    x_user_email: str = Header(..., description="Email текущего пользователя"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Обновление заказа его владельцем.
    """
    return await update_order_as_owner(
        db, order_id, order_in.dish_ids, x_user_email, addition=order_in.addition, status=order_in.status
    )


@router.put("/{order_id}/status", response_model=OrderRead)
async def update_order_status_endpoint(
    order_id: int,
    status_in: OrderStatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    return await update_order_status(db, order_id, status_in.status)


@router.delete("/{order_id}", status_code=204)
async def remove_order(order_id: int, session: AsyncSession = Depends(get_async_session)):
    """
    Удаляет заказ.
    """
    await delete_order(session, order_id)
