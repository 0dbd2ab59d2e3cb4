import pytest

from restaurant_backoffice.crud.review import (
    create_review,
    delete_review,
    get_reviews,
    get_reviews_by_dish,
    get_reviews_by_user,
    update_review,
)
from restaurant_backoffice.errors import Forbidden, InvalidArgument, NotFound


async def test_create_and_list_reviews(db, alice, bob, soup, salad):
    first = await create_review(db, alice.email, soup.id, 4, "tasty")
    second = await create_review(db, bob.email, soup.id, 2)
    third = await create_review(db, alice.email, salad.id, 5)

    assert [r.id for r in await get_reviews_by_user(db, alice.id)] == [first.id, third.id]
    assert [r.id for r in await get_reviews_by_dish(db, soup.id)] == [first.id, second.id]
    assert [r.rating for r in await get_reviews(db, sort_by="rating", order="desc")] == [5, 4, 2]
    assert [r.rating for r in await get_reviews(db, sort_by="rating")] == [2, 4, 5]


async def test_review_validation(db, alice, soup):
    with pytest.raises(InvalidArgument):
        await create_review(db, alice.email, soup.id, 6)
    with pytest.raises(NotFound):
        await create_review(db, alice.email, 999, 3)
    with pytest.raises(NotFound):
        await create_review(db, "ghost@example.com", soup.id, 3)
    with pytest.raises(InvalidArgument):
        await get_reviews(db, sort_by="author")


async def test_only_author_can_update(db, alice, bob, soup):
    review = await create_review(db, alice.email, soup.id, 3, "ok")

    with pytest.raises(Forbidden):
        await update_review(db, review.id, bob.email, 1, "bad")

    updated = await update_review(db, review.id, alice.email, 5, "better on second try")
    assert updated.rating == 5
    assert updated.comment == "better on second try"


async def test_delete_review(db, alice, soup):
    review = await create_review(db, alice.email, soup.id, 3)

    await delete_review(db, review.id)

    with pytest.raises(NotFound):
        await delete_review(db, review.id)
