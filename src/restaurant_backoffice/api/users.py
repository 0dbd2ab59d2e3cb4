from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from ..crud.user import create_user, delete_user, get_user_by_id, get_users, update_user
from ..db.session import get_async_session
from ..schemas.user import UserCreate, UserOut, UserUpdate

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/", response_model=List[UserOut])
async def list_users(session: AsyncSession = Depends(get_async_session)):
    return await get_users(session)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int, session: AsyncSession = Depends(get_async_session)):
    return await get_user_by_id(session, user_id)


@router.post("/", response_model=UserOut, status_code=201)
async def create_user_endpoint(user_in: UserCreate, session: AsyncSession = Depends(get_async_session)):
    """
    Регистрирует пользователя. Занятый email даёт 409.
    """
    return await create_user(session, user_in.name, user_in.email, user_in.role)


@router.put("/{user_id}", response_model=UserOut)
async def update_user_endpoint(
    user_id: int,
    user_in: UserUpdate,
    session: AsyncSession = Depends(get_async_session),
):
    return await update_user(session, user_id, name=user_in.name, email=user_in.email, role=user_in.role)


@router.delete("/{user_id}", status_code=204)
async def remove_user(user_id: int, session: AsyncSession = Depends(get_async_session)):
    """
    Удаляет пользователя: освобождает его столики и отвязывает отзывы.
    """
    await delete_user(session, user_id)
