import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_backoffice.crud.user import get_user_by_email
from restaurant_backoffice.errors import Forbidden, InvalidArgument, NotFound
from restaurant_backoffice.models import Dish, Review

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "date": Review.created_at,
    "rating": Review.rating,
}


def _validate_rating(rating: int) -> None:
    if not 1 <= rating <= 5:
        raise InvalidArgument(f"Rating must be between 1 and 5, got {rating}", entity="review", identifier=rating)


async def get_review_by_id(db: AsyncSession, review_id: int) -> Review:
    review = await db.get(Review, review_id)
    if not review:
        raise NotFound(f"Review with id={review_id} not found", entity="review", identifier=review_id)
    return review


async def create_review(
    db: AsyncSession,
    author_email: str,
    dish_id: int,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    _validate_rating(rating)
    author = await get_user_by_email(db, author_email)

    dish = await db.get(Dish, dish_id)
    if not dish:
        raise NotFound(f"Dish with id={dish_id} not found", entity="dish", identifier=dish_id)

    review = Review(user_id=author.id, dish_id=dish.id, rating=rating, comment=comment)
    db.add(review)
    await db.commit()
    await db.refresh(review)

    logger.info("Review %s created for dish %s by user %s", review.id, dish.id, author.id)
    return review


async def update_review(
    db: AsyncSession,
    review_id: int,
    acting_email: str,
    rating: int,
    comment: Optional[str] = None,
) -> Review:
    """
    Обновляет отзыв. Редактировать может только автор.
    """
    review = await get_review_by_id(db, review_id)
    acting_user = await get_user_by_email(db, acting_email)

    if review.user_id != acting_user.id:
        logger.warning("User %s tried to edit review %s of another user", acting_email, review_id)
        raise Forbidden(
            f"User {acting_email} cannot edit review {review_id}", entity="review", identifier=review_id
        )

    _validate_rating(rating)
    review.rating = rating
    review.comment = comment
    await db.commit()
    await db.refresh(review)

    logger.info("Review %s updated", review.id)
    return review


async def get_reviews(db: AsyncSession, sort_by: Optional[str] = None, order: str = "asc") -> List[Review]:
    """
    Возвращает все отзывы.
    sort_by: 'date' | 'rating'; order: 'asc' | 'desc'.
    """
    stmt = select(Review)
    if sort_by is not None:
        column = SORT_FIELDS.get(sort_by.lower())
        if column is None:
            raise InvalidArgument(f"Unsupported sort field: {sort_by}", entity="review", identifier=sort_by)
        stmt = stmt.order_by(column.desc() if order.lower() == "desc" else column.asc(), Review.id)
    else:
        stmt = stmt.order_by(Review.id)

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_reviews_by_user(db: AsyncSession, user_id: int) -> List[Review]:
    result = await db.execute(select(Review).where(Review.user_id == user_id).order_by(Review.id))
    return list(result.scalars().all())


async def get_reviews_by_dish(db: AsyncSession, dish_id: int) -> List[Review]:
    result = await db.execute(select(Review).where(Review.dish_id == dish_id).order_by(Review.id))
    return list(result.scalars().all())


async def delete_review(db: AsyncSession, review_id: int) -> None:
    review = await get_review_by_id(db, review_id)
    await db.delete(review)
    await db.commit()
    logger.info("Review %s deleted", review_id)


async def detach_reviews_for_user(db: AsyncSession, user_id: int) -> int:
    """
    Отвязывает отзывы от автора (user_id = NULL), не удаляя их.
    Не коммитит: вызывается внутри транзакции удаления пользователя.
    """
    result = await db.execute(
        update(Review)
        .where(Review.user_id == user_id)
        .values(user_id=None)
        .execution_options(synchronize_session="fetch")
    )
    return result.rowcount
