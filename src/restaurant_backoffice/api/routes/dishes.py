from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.crud.dish import create_dish, get_dishes, get_dish_by_id, update_dish, delete_dish
from restaurant_backoffice.db.session import get_async_session
from restaurant_backoffice.schemas.dish import DishCreate, DishRead, DishUpdate


router = APIRouter(prefix="/dishes", tags=["dishes"])

@router.get("/", response_model=List[DishRead])
async def list_dishes(
    category: Optional[str] = Query(None, description="Фильтр по категории"),
    sort_by: Optional[str] = Query(None, description="price | name"),
    order: str = Query("asc", description="asc | desc"),
    page: Optional[int] = Query(None, description="Номер страницы, с нуля"),
    size: Optional[int] = Query(None, description="Размер страницы"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Меню. Поддерживает фильтр по категории, сортировку по цене или названию и пагинацию.
    """
    return await get_dishes(db, category=category, sort_by=sort_by, order=order, page=page, size=size)


@router.get("/{dish_id}", response_model=DishRead)
async def get_dish(dish_id: int, db: AsyncSession = Depends(get_async_session)):
    return await get_dish_by_id(db, dish_id)


@router.post("/", response_model=DishRead, status_code=201)
async def create_dish_endpoint(dish_in: DishCreate, db: AsyncSession = Depends(get_async_session)):
    return await create_dish(
        db,
        name=dish_in.name,
        price=dish_in.price,
        category=dish_in.category,
        is_available=dish_in.is_available,
    )


@router.put("/{dish_id}", response_model=DishRead)
async def update_dish_endpoint(
    dish_id: int,
    dish_in: DishUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """
    Меняет только переданные поля.
    """
    return await update_dish(
        db,
        dish_id,
        name=dish_in.name,
        price=dish_in.price,
        category=dish_in.category,
        is_available=dish_in.is_available,
    )


@router.delete("/{dish_id}", status_code=204)
async def remove_dish(dish_id: int, db: AsyncSession = Depends(get_async_session)):
    await delete_dish(db, dish_id)
