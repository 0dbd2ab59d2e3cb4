from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.crud.review import create_review, get_reviews, get_review_by_id, update_review
from restaurant_backoffice.crud.review import get_reviews_by_dish, get_reviews_by_user, delete_review
from restaurant_backoffice.db.session import get_async_session
from restaurant_backoffice.schemas.review import ReviewCreate, ReviewRead, ReviewUpdate


router = APIRouter(prefix="/reviews", tags=["reviews"])

@router.get("/", response_model=List[ReviewRead])
async def list_reviews(
    sort_by: Optional[str] = Query(None, description="date | rating"),
    order: str = Query("asc", description="asc | desc"),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_reviews(db, sort_by=sort_by, order=order)


@router.get("/dish/{dish_id}", response_model=List[ReviewRead])
async def list_dish_reviews(dish_id: int, db: AsyncSession = Depends(get_async_session)):
    return await get_reviews_by_dish(db, dish_id)


@router.get("/user/{user_id}", response_model=List[ReviewRead])
async def list_user_reviews(user_id: int, db: AsyncSession = Depends(get_async_session)):
    return await get_reviews_by_user(db, user_id)


@router.get("/{review_id}", response_model=ReviewRead)
async def get_review(review_id: int, db: AsyncSession = Depends(get_async_session)):
    return await get_review_by_id(db, review_id)


@router.post("/", response_model=ReviewRead, status_code=201)
async def create_review_endpoint(
    review_in: ReviewCreate,
    x_user_email: str = Header(..., description="Email текущего пользователя"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Отзыв пишется от имени текущего пользователя.
    """
    return await create_review(db, x_user_email, review_in.dish_id, review_in.rating, review_in.comment)


@router.put("/{review_id}", response_model=ReviewRead)
async def update_review_endpoint(
    review_id: int,
    review_in: ReviewUpdate,
    x_user_email: str = Header(..., description="Email текущего пользователя"),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Редактировать отзыв может только его автор, иначе 403.
    """
    return await update_review(db, review_id, x_user_email, review_in.rating, review_in.comment)


@router.delete("/{review_id}", status_code=204)
async def remove_review(review_id: int, db: AsyncSession = Depends(get_async_session)):
    await delete_review(db, review_id)
